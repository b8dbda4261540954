"""Records stored in the work-record database."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AffectedTypeDict:
    """An entry of the affected-area dictionary."""

    id: int = 0
    affected: str = ""
    comment: str = ""


@dataclass
class DepartmentDict:
    """A department."""

    id: int = 0
    name: str = ""
    description: str = ""
    create_time: str = ""


@dataclass
class EmployeeDict:
    """An employee; department_name is filled in by joined queries."""

    id: int = 0
    name: str = ""
    employee_number: str = ""
    department_id: int = 0
    comment: str = ""
    create_time: str = ""
    department_name: str = ""


@dataclass
class FileRecord:
    """An uploaded file."""

    id: int = 0
    file_name: str = ""
    file_path: str = ""
    create_time: str = ""


@dataclass
class IssueProgressDict:
    """An entry of the issue-progress dictionary."""

    id: int = 0
    progress: str = ""
    progress_class: str = ""
    comment: str = ""


@dataclass
class IssueRecord:
    """A reported issue with the names of its related dictionary entries."""

    id: int = 0
    issue_title: str = ""
    reported_by: str = ""
    description: str = ""
    progress_id: int = 0
    progress_name: str = ""
    progress_class: str = ""
    affected_id: int = 0
    affected_name: str = ""
    source_type_id: int = 0
    source_type_name: str = ""
    create_time: str = ""
    update_time: str = ""
    responsible_person: str = ""
    employee_id: int = 0
    employee_name: str = ""
    department_id: int = 0


@dataclass
class RequirementRecord:
    """A requirement with the names of its related dictionary entries."""

    id: int = 0
    title: str = ""
    requirement_status_id: int = 0
    requirement_status_name: str = ""
    requirement_status_class: str = ""
    affected_id: int = 0
    affected_name: str = ""
    source_type_id: int = 0
    source_type_name: str = ""
    create_time: str = ""
    update_time: str = ""
    employee_id: int = 0
    employee_name: str = ""
    department_id: int = 0


@dataclass
class RequirementStatusDict:
    """An entry of the requirement-status dictionary."""

    id: int = 0
    status: str = ""
    comment: str = ""
    requirement_status_class: str = ""


@dataclass
class SourceTypeDict:
    """An entry of the source-type dictionary."""

    id: int = 0
    type: str = ""
    comment: str = ""


@dataclass
class WorkRecord:
    """A work item; file_info maps file ids to JSON descriptions of attached files."""

    id: int = 0
    requirement_id: int = 0
    requirement_title: str = ""
    create_time: str = ""
    work_type_id: int = 0
    work_type: str = ""
    work_content: str = ""
    affected_id: int = 0
    affected_name: str = ""
    source_type_id: int = 0
    source_type_name: str = ""
    work_record_status_id: int = 0
    status_name: str = ""
    status_class: str = ""
    completion_time: str = ""
    employee_id: int = 0
    employee_name: str = ""
    department_id: int = 0
    file_info: dict[int, str] = field(default_factory=dict)


@dataclass
class WorkRecordStatusDict:
    """An entry of the work-record status dictionary."""

    id: int = 0
    status_name: str = ""
    status_class: str = ""


@dataclass
class WorkTypeDict:
    """An entry of the work-type dictionary."""

    id: int = 0
    type: str = ""
    comment: str = ""
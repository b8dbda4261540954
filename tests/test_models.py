from dataclasses import asdict, replace

from work_record.models import (
    AffectedTypeDict,
    DepartmentDict,
    EmployeeDict,
    FileRecord,
    IssueProgressDict,
    IssueRecord,
    RequirementRecord,
    RequirementStatusDict,
    SourceTypeDict,
    WorkRecord,
    WorkRecordStatusDict,
    WorkTypeDict,
)


def test_dictionary_field_order():
    assert list(asdict(AffectedTypeDict(1, "a", "c")).items()) == [
        ("id", 1), ("affected", "a"), ("comment", "c")
    ]
    assert list(asdict(SourceTypeDict(2, "t", "c")).items()) == [
        ("id", 2), ("type", "t"), ("comment", "c")
    ]
    assert list(asdict(WorkTypeDict(3, "t", "c")).items()) == [
        ("id", 3), ("type", "t"), ("comment", "c")
    ]
    assert list(asdict(WorkRecordStatusDict(4, "n", "k")).items()) == [
        ("id", 4), ("status_name", "n"), ("status_class", "k")
    ]
    assert list(asdict(IssueProgressDict(5, "p", "k", "c")).items()) == [
        ("id", 5), ("progress", "p"), ("progress_class", "k"), ("comment", "c")
    ]
    assert list(asdict(RequirementStatusDict(6, "s", "c", "k")).items()) == [
        ("id", 6), ("status", "s"), ("comment", "c"), ("requirement_status_class", "k")
    ]


def test_positional_matches_keywords():
    assert AffectedTypeDict(1, "a", "b") == AffectedTypeDict(id=1, affected="a", comment="b")
    assert DepartmentDict(2, "dev", "desc") == DepartmentDict(id=2, name="dev", description="desc")
    assert FileRecord(3, "f.txt", "p/f.txt") == FileRecord(id=3, file_name="f.txt", file_path="p/f.txt")


def test_employee_defaults():
    employee = EmployeeDict(name="Ann")
    assert employee.id == 0
    assert employee.department_id == 0
    assert employee.department_name == ""


def test_issue_record_round_trip_through_dict():
    issue = IssueRecord(id=5, issue_title="crash", progress_id=2, employee_id=9)
    assert IssueRecord(**asdict(issue)) == issue
    assert asdict(issue)["issue_title"] == "crash"


def test_requirement_replace_keeps_other_fields():
    record = RequirementRecord(id=1, title="login", affected_id=4)
    changed = replace(record, title="logout")
    assert changed.title == "logout"
    assert changed.affected_id == 4
    assert record.title == "login"


def test_work_record_file_info_not_shared():
    first = WorkRecord()
    second = WorkRecord()
    first.file_info[1] = '{"id":1}'
    assert second.file_info == {}
    assert first.file_info == {1: '{"id":1}'}


def test_work_record_has_all_columns():
    record = WorkRecord(
        id=7,
        completion_time="2024-01-02",
        work_record_status_id=3,
        department_id=4,
    )
    values = asdict(record)
    names = list(values)
    assert names[0] == "id"
    assert names[-1] == "file_info"
    assert values["id"] == 7
    assert values["completion_time"] == "2024-01-02"
    assert values["work_record_status_id"] == 3
    assert values["department_id"] == 4
    assert values["file_info"] == {}
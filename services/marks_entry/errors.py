class MarksEntryError(Exception):
    """Base error of the marks entry workflow"""
    pass


class SubjectNotAvailable(MarksEntryError):
    """The subject is scoped to a department the student is not in"""
    pass


class StudentNotVisible(MarksEntryError):
    """The student is outside the active department / section filter"""
    pass


class EmptySubmission(MarksEntryError):
    """Nothing to submit for the visible students"""
    pass

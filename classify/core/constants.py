from enum import Enum


CBT_OPTIONS = ("A", "B", "C", "D")

class RoleEnum(str, Enum):
    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"

class OptionEnum(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"

class DifficultyEnum(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

class ExamCategoryEnum(str, Enum):
    TEST = "TEST"
    EXAM = "EXAM"

class AttemptStatusEnum(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

class ExamDeletionModeEnum(str, Enum):
    ARCHIVE = "archive"
    FULL = "full"

class AttendanceStatusEnum(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"

class WrittenExamTypeEnum(str, Enum):
    WRITTEN = "WRITTEN"
    PRACTICAL = "PRACTICAL"
    ORAL = "ORAL"

# Attendance statuses that count as having attended a session
ATTENDED_STATUSES = (AttendanceStatusEnum.PRESENT, AttendanceStatusEnum.LATE)

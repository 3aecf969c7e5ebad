# Import every model so Base.metadata and relationship() string lookups see them.
from classify.models.user import User  # noqa
from classify.models.department import Department  # noqa
from classify.models.student import Student  # noqa
from classify.models.academic_session import AcademicSession, Semester  # noqa
from classify.models.course import Course, Topic  # noqa
from classify.models.course_enrollment import Enrollment  # noqa
from classify.models.question import Question  # noqa
from classify.models.exam import Exam, ExamQuestion  # noqa
from classify.models.exam_attempt import ExamAttempt  # noqa
from classify.models.answer import Answer  # noqa
from classify.models.written_exam import WrittenExam, Score  # noqa
from classify.models.attendance import AttendanceSession, Attendance  # noqa
from classify.models.institution_setting import InstitutionSetting  # noqa

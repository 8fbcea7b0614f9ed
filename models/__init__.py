from models.institution import Institution
from models.course import Course
from models.student import Student
from models.score import EvaluationKind, EvaluationSpec, ScoreRecord
from models.session import SessionLog, CourseTarget
from models.gradebook import GradeBook, GradebookError, ConsistencyReport

__all__ = [
    "Institution",
    "Course",
    "Student",
    "EvaluationKind",
    "EvaluationSpec",
    "ScoreRecord",
    "SessionLog",
    "CourseTarget",
    "GradeBook",
    "GradebookError",
    "ConsistencyReport",
]

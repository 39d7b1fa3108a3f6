# __init__.py
from app.models.course import Course, CourseCategory
from app.models.enrollment import Enrollment
from app.models.user import User

__all__ = [
	"Course",
	"CourseCategory",
	"Enrollment",
	"User",
]

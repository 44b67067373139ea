# course_portal - Course registration portal API
__version__ = "1.0.0"

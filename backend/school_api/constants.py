"""Business constants and user-facing messages."""

MAX_STUDENTS_PER_CLASS = 20

STUDENT_ID_REQUIRED = "StudentId is required."
STUDENT_NAME_REQUIRED = "Name is required."
STUDENT_SURNAME_REQUIRED = "Surname is required."
STUDENT_DATE_OF_BIRTH_REQUIRED = "DateOfBirth is required."
STUDENT_NOT_FOUND = "Student with ID '{0}' not found."
STUDENT_ALREADY_EXISTS = "Student with ID '{0}' already exists."
STUDENT_DELETED = "Student with ID '{0}' has been deleted."

CLASS_NAME_REQUIRED = "Name is required."
CLASS_LEADING_TEACHER_REQUIRED = "LeadingTeacher is required."
CLASS_NOT_FOUND = "School class with ID {0} not found."
CLASS_DELETED = "School class with ID {0} has been deleted."
CLASS_FULL = "Class '{0}' already has the maximum of {1} students."
STUDENT_ALREADY_IN_CLASS = "Student '{0} {1}' is already in this class."
STUDENT_NOT_IN_CLASS = "Student '{0} {1}' is not in this class."
STUDENT_ADDED_TO_CLASS = "Student '{0} {1}' has been added to class '{2}'."
STUDENT_REMOVED_FROM_CLASS = "Student '{0} {1}' has been removed from class '{2}'."

INTERNAL_ERROR = "An unexpected error occurred while processing your request."

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .student import Student

logger = logging.getLogger(__name__)

# grade -> maximum number of books out at once; unlisted grades cannot borrow
BORROW_LIMITS: Dict[int, int] = {6: 4, 7: 3, 8: 2, 9: 2}


def borrow_limit(grade: int) -> int:
    return BORROW_LIMITS.get(grade, 0)


class Roster:
    """In-memory registry of students keyed by id."""

    def __init__(self) -> None:
        self._students: Dict[int, Student] = {}

    def add(self, student: Student) -> None:
        if student.student_id in self._students:
            raise ValueError(f"Student with id {student.student_id} already exists.")
        self._students[student.student_id] = student
        logger.debug(f"Registered student {student.student_id}")

    def find_student(self, student_id: int) -> Optional[Student]:
        return self._students.get(student_id)

    def list_students(self) -> List[Student]:
        return list(self._students.values())

    @staticmethod
    def borrow_limit(grade: int) -> int:
        return borrow_limit(grade)

    def __len__(self) -> int:
        return len(self._students)

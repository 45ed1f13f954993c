from sqlalchemy import Column, Integer, String
from database.db import Base


class Subject(Base):
    __tablename__ = "subjects"  # subjects offered per class

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)                # subject name (e.g. Bangla 1st Paper)
    class_level = Column(Integer, nullable=False)             # class the subject belongs to
    department = Column(String(50))                           # set only for department scoped subjects
    teacher_name = Column(String(100))                        # assigned subject teacher
    full_mark = Column(Integer, nullable=False, default=100)
    pass_mark = Column(Integer, nullable=False, default=33)
    cq_mark = Column(Integer)                                 # creative question max
    mcq_mark = Column(Integer)                                # multiple choice max
    practical_mark = Column(Integer)                          # practical max

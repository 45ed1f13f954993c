import argparse

from database.db import SessionLocal
from models.teachers import Teacher, TeacherLevel
from utils.security import hash_password


def create_teacher(name: str, username: str, password: str, levels, designation: str = None) -> int:
    """levels: iterable of "8:A" style class:section pairs"""
    db = SessionLocal()
    try:
        teacher = Teacher(
            name=name,
            username=username,
            password_hash=hash_password(password),
            designation=designation,
        )
        for pair in levels:
            class_name, section = pair.split(":", 1)
            teacher.levels.append(TeacherLevel(class_name=int(class_name), section=section))
        db.add(teacher)
        db.commit()
        return teacher.id
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a teacher account")
    parser.add_argument("name")
    parser.add_argument("username")
    parser.add_argument("password")
    parser.add_argument("--designation")
    parser.add_argument("--level", action="append", default=[], help="class:section, e.g. 8:A")
    args = parser.parse_args()

    teacher_id = create_teacher(args.name, args.username, args.password, args.level, args.designation)
    print(f"✅ teacher created (id={teacher_id})")

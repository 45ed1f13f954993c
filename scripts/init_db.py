from database.db import Base, engine

# ✅ every model must be imported so its table is registered on Base
from models import exams, marks, students, subjects, teachers  # noqa: F401


def init_db():
    Base.metadata.create_all(bind=engine)
    print("✅ tables created")


if __name__ == "__main__":
    init_db()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
# silence HTTP library debug logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import auth, exams, marks, students, subjects

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS (dashboard / teacher portal)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ latency header + access log
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (one JSON error envelope)
add_error_handlers(app)

# ✅ /api prefix
app.include_router(auth.router,      prefix="/api")
app.include_router(exams.router,     prefix="/api")
app.include_router(marks.router,     prefix="/api")
app.include_router(students.router,  prefix="/api")
app.include_router(subjects.router,  prefix="/api")


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


# ✅ root
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - {settings.SCHOOL_NAME}"}

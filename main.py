from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from classify.core.config import settings
from classify.core.logging import configure_logging
from classify.endpoints import academic_session, attendance, cbt, course, department, results, student, written_exam
from classify.endpoints import settings as settings_endpoints
from classify.middleware.exceptions import global_exception_handler, http_exception_handler, validation_exception_handler
from classify.middleware.logging import RequestLoggingMiddleware
from classify.core.scheduler import start_scheduler, stop_scheduler

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.include_router(department.router, prefix="/departments", tags=["Departments"])
app.include_router(academic_session.router, prefix="/sessions", tags=["Academic Sessions"])
app.include_router(course.router, prefix="/courses", tags=["Courses"])
app.include_router(student.router, prefix="/students", tags=["Students"])
app.include_router(results.router, prefix="/students", tags=["Results"])
app.include_router(cbt.router, prefix="/cbt", tags=["CBT"])
app.include_router(written_exam.router, prefix="/written-exams", tags=["Written Exams"])
app.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
app.include_router(settings_endpoints.router, prefix="/settings", tags=["Settings"])


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok", "version": settings.VERSION}

@app.on_event("startup")
async def startup_event():
    start_scheduler()

@app.on_event("shutdown")
async def shutdown_event():
    stop_scheduler()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

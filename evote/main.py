# evote/main.py
# Run with: uvicorn evote.main:app
import logging

from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from evote.config import CORS_ORIGINS, MONGO_DB
from evote.errors import EVoteError, StorageError
from evote.routes.deps import to_http
from evote.routes.auth_routes import router as auth_router
from evote.routes.candidate_routes import router as candidate_router
from evote.routes.election_routes import router as election_router
from evote.routes.vote_routes import vote_router, results_router
from evote.routes.voter_routes import router as voter_router
from evote.storage import ElectionStore, get_storage

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="E-Voting System API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(voter_router)
app.include_router(candidate_router)
app.include_router(election_router)
app.include_router(vote_router)
app.include_router(results_router)


@app.exception_handler(EVoteError)
async def evote_error_handler(request, exc: EVoteError):
    # Failures raised outside a route body, e.g. while opening the store
    http_exc = to_http(exc)
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


@app.get("/health", tags=["Root"])
def health_check(storage: ElectionStore = Depends(get_storage)):
    try:
        active = storage.is_election_active()
    except StorageError as e:
        raise HTTPException(status_code=503, detail=f"Database unavailable: {e.cause}")
    return {"status": "healthy", "database": MONGO_DB, "election_active": active}


@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Welcome to the E-Voting System API"}


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)

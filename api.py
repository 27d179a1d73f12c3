"""
FastAPI server exposing the episode explorer.
Endpoints:
- GET /health: basic health check
- GET /episodes?text=...&era=...&sort=...&order=asc: filtered and sorted episodes
- GET /decades: same filters, grouped by decade
- GET /warnings: data-quality warnings for the loaded dataset
- GET /options: values for the era/doctor/companion filters
- GET /export.csv: CSV of the filtered and sorted episodes
- POST /reload: re-run the load (manual retry after a failure)

Startup loads the configured data sources (EPISODES_DATA_SOURCES or the published files).
"""

# Import standard libraries for timing and immutable updates
import time  # measure startup and request latencies
from dataclasses import replace  # derive a new QueryState
from typing import Dict, List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, HTTPException, Query  # FastAPI primitives
from fastapi.responses import Response  # raw CSV responses
from pydantic import BaseModel  # response schema definitions

# Import our internal modules for loading, querying, and formatting
from episode_explorer.config import CSV_FILENAME, configure_logging, data_sources  # settings
from episode_explorer.data_loader import DataLoadError  # load failures
from episode_explorer.dates import to_iso  # canonical date text
from episode_explorer.explorer import EpisodeExplorer  # session over the dataset
from episode_explorer.formatting import display_row, format_writers  # shared display values
from episode_explorer.models import SEARCH_FIELDS, Episode, QueryState  # core data classes

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Episode Explorer API", version="1.0.0")  # web app

# Globals that hold the explorer instance and measured startup time
EXPLORER: EpisodeExplorer = EpisodeExplorer()  # starts empty until a load succeeds
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# Pydantic model for one supporting cast member
class CastMemberOut(BaseModel):
	actor: str  # performer name
	character: str  # role played (may be empty)


# Pydantic model that describes the shape of a single episode in responses
class EpisodeOut(BaseModel):
	rank: Optional[str] = None  # rank as displayed
	title: str  # episode title
	series: Optional[str] = None  # series as displayed
	era: Optional[str] = None  # era category
	broadcast_date: Optional[str] = None  # canonical YYYY-MM-DD when parseable
	year: str  # year or "N/A"
	director: str  # director name
	writer: str  # writers joined by commas
	doctor: str  # "Actor (Incarnation)"
	companion: str  # "Actor (Character)"
	cast_count: int  # number of cast members
	cast: List[CastMemberOut] = []  # the cast members themselves
	plot: Optional[str] = None  # synopsis, if any


# Pydantic model for a decade bucket
class DecadeOut(BaseModel):
	decade: int  # first year of the decade
	label: str  # e.g. "1960s"
	count: int  # number of episodes in the bucket
	era_counts: Dict[str, int]  # era -> count
	episodes: List[EpisodeOut]  # members ordered by rank


class EpisodesResponse(BaseModel):
	total: int  # size of the loaded dataset
	matched: int  # number of episodes after filtering
	warnings: int  # data-quality warning count
	elapsed_ms: float  # server-side time in ms
	episodes: List[EpisodeOut]  # filtered + sorted episodes


class DecadesResponse(BaseModel):
	matched: int  # episodes after filtering (before dropping undated ones)
	decades: List[DecadeOut]  # ascending by decade


class WarningOut(BaseModel):
	index: int  # 1-based record position
	code: str  # warning kind
	field: str  # field concerned
	message: str  # human-readable text


def to_episode_out(episode: Episode) -> EpisodeOut:
	"""Convert an Episode to its response model using the shared display values."""
	rank, title, series, era, year, director, _, doctor, companion, cast = display_row(episode)
	return EpisodeOut(
		rank=rank or None,
		title=title,
		series=series or None,
		era=era or None,
		broadcast_date=to_iso(episode.broadcast_date),
		year=year,
		director=director,
		writer=format_writers(episode.writer),
		doctor=doctor,
		companion=companion,
		cast_count=int(cast),
		cast=[CastMemberOut(actor=m.actor, character=m.character or "") for m in episode.cast],
		plot=episode.plot or None,
	)


def build_state(
	text: str = '',
	era: str = '',
	doctor: str = '',
	companion: str = '',
	search_fields: Optional[List[str]] = None,
	sort: Optional[str] = None,
	order: str = 'asc',
) -> QueryState:
	"""Turn request parameters into a QueryState; a given sort counts as an explicit choice."""
	state = QueryState(text=text, era=era, doctor=doctor, companion=companion)
	if search_fields:
		try:
			state = state.with_search_fields(*search_fields)
		except ValueError as e:
			raise HTTPException(status_code=422, detail=str(e))
	if sort:
		state = replace(state, sort_field=sort, ascending=(order != 'desc'), sort_explicit=True)
	return state


def require_data():
	"""Fail with 503 while no dataset is loaded."""
	if not EXPLORER.loaded:
		detail = EXPLORER.last_error or "Episodes are not loaded yet"
		logger.warning(f"[API] Request rejected: {detail}")  # guard log
		raise HTTPException(status_code=503, detail=f"Could not load episodes: {detail}")


# FastAPI startup hook to load the dataset once
@app.on_event("startup")
async def startup_event():
	"""Load the configured sources; a failure leaves the API up but empty."""
	global STARTUP_TIME_S  # refer to module-level global
	configure_logging()  # apply EXPLORER_LOG_LEVEL
	start = time.time()  # start timer for startup latency
	logger.info("[API] Startup: loading episodes...")  # log intent
	try:
		EXPLORER.load(data_sources())  # all-or-nothing
	except (DataLoadError, FileNotFoundError) as e:
		logger.error(f"[API] Startup load failed: {e}")  # surfaced on requests as 503
	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s.")  # summary log


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",  # constant indicator
		"data_loaded": EXPLORER.loaded,  # True once a load succeeded
		"episodes": len(EXPLORER.episodes),  # dataset size
		"last_error": EXPLORER.last_error,  # message of the last failed load
		"startup_seconds": round(STARTUP_TIME_S, 2)  # startup latency
	}


@app.get("/episodes", response_model=EpisodesResponse)
async def episodes(
	text: str = Query('', description="Free-text filter"),
	era: str = '',
	doctor: str = '',
	companion: str = '',
	search_fields: Optional[List[str]] = Query(None, description=f"Any of {', '.join(SEARCH_FIELDS)}"),
	sort: Optional[str] = Query(None, description="Sort field, or 'relevance'"),
	order: str = Query('asc', pattern="^(asc|desc)$"),
):
	"""Filtered and sorted episodes."""
	require_data()
	start = time.time()  # start timer
	state = build_state(text, era, doctor, companion, search_fields, sort, order)
	results = EXPLORER.query(state)  # run pipeline
	elapsed_ms = (time.time() - start) * 1000  # compute ms
	logger.info(f"[API] /episodes served {len(results)} results in {elapsed_ms:.2f} ms")  # summary
	return EpisodesResponse(
		total=len(EXPLORER.episodes),
		matched=len(results),
		warnings=len(EXPLORER.warnings),
		elapsed_ms=round(elapsed_ms, 2),
		episodes=[to_episode_out(ep) for ep in results],
	)


@app.get("/decades", response_model=DecadesResponse)
async def decades(
	text: str = '',
	era: str = '',
	doctor: str = '',
	companion: str = '',
	search_fields: Optional[List[str]] = Query(None),
):
	"""Filtered episodes grouped by decade."""
	require_data()
	state = build_state(text, era, doctor, companion, search_fields).with_view('decades')
	view = EXPLORER.view(state)
	logger.info(f"[API] /decades served {len(view.groups)} groups")
	return DecadesResponse(
		matched=len(view.episodes),
		decades=[
			DecadeOut(
				decade=g.decade,
				label=g.label,
				count=g.count,
				era_counts=g.era_counts,
				episodes=[to_episode_out(ep) for ep in g.episodes],
			)
			for g in view.groups
		],
	)


@app.get("/warnings", response_model=List[WarningOut])
async def warnings():
	"""Data-quality warnings for the loaded dataset."""
	require_data()
	return [WarningOut(index=w.index, code=w.code, field=w.field, message=w.message) for w in EXPLORER.warnings]


@app.get("/options")
async def options():
	"""Choices for the era/doctor/companion filters."""
	require_data()
	return EXPLORER.options()


@app.get("/export.csv")
async def export_csv(
	text: str = '',
	era: str = '',
	doctor: str = '',
	companion: str = '',
	search_fields: Optional[List[str]] = Query(None),
	sort: Optional[str] = None,
	order: str = Query('asc', pattern="^(asc|desc)$"),
):
	"""CSV of the filtered and sorted episodes."""
	require_data()
	state = build_state(text, era, doctor, companion, search_fields, sort, order)
	content = EXPLORER.export(state)
	logger.info(f"[API] /export.csv served for {state}")
	return Response(
		content=content,
		media_type="text/csv; charset=utf-8",
		headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
	)


@app.post("/reload")
async def reload():
	"""Retry loading the configured sources; the previous dataset stays if it fails."""
	try:
		EXPLORER.load(data_sources())
	except (DataLoadError, FileNotFoundError) as e:
		raise HTTPException(status_code=503, detail=f"Could not load episodes: {e}")
	return {"status": "ok", "episodes": len(EXPLORER.episodes), "warnings": len(EXPLORER.warnings)}

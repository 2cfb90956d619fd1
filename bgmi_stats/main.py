from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .classify import classify_text, group_texts, keyword_counts
from .config import EngineConfig, load_config, log_level
from .custom_logger import get_custom_logger
from .exceptions import ConfigError, NoSlotsDetectedError, OCRError
from .models import ClassifiedImage, ClassifyResponse, ExtractResponse, ParseTextRequest
from .ocr import ocr_image_bytes
from .session import MatchSession

logger = get_custom_logger("bgmi_stats", level=log_level())


app = FastAPI()
app.add_middleware(
  CORSMiddleware,
  allow_origins=["*"],
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
  return load_config()


@app.exception_handler(NoSlotsDetectedError)
async def no_slots_handler(request: Request, exc: NoSlotsDetectedError):
  logger.warning(f"{request.url.path}: {exc.message}")
  return JSONResponse(status_code=422, content={
    "detail": exc.message,
    "raw": {"lobbyText": exc.lobby_text, "resultText": exc.result_text}
  })


@app.exception_handler(OCRError)
async def ocr_error_handler(request: Request, exc: OCRError):
  logger.warning(f"{request.url.path}: {exc}")
  return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, exc: ConfigError):
  logger.error(f"{request.url.path}: {exc}")
  return JSONResponse(status_code=500, content={"detail": str(exc), "key": exc.key})


async def _read_texts(images: List[UploadFile]):
  # one text blob per image, in submission order
  texts = []
  for image in images:
    data = await image.read()
    # easyocr is CPU-bound; keep it off the event loop
    texts.append(await run_in_threadpool(ocr_image_bytes, data, image.filename or ""))
  return texts


def _respond(session: MatchSession) -> ExtractResponse:
  output = session.run()
  return ExtractResponse(
    output=output,
    blocks=output.blocks(),
    reconciled=session.reconciled,
    raw={"lobbyText": session.lobby_text, "resultText": session.result_text},
    droppedImages=session.dropped,
  )


@app.post("/ocr/bgmi/extract", response_model=ExtractResponse)
async def bgmi_extract(
  lobbyImages: List[UploadFile] = File(...),
  resultImages: List[UploadFile] = File(...),
  config: EngineConfig = Depends(get_config),
):
  session = MatchSession(config)
  for text in await _read_texts(lobbyImages):
    session.add_text(text, "lobby")
  for text in await _read_texts(resultImages):
    session.add_text(text, "result")
  return _respond(session)


@app.post("/ocr/bgmi/parse", response_model=ExtractResponse)
async def bgmi_parse(payload: ParseTextRequest, config: EngineConfig = Depends(get_config)):
  # hand-corrected raw text goes straight to the parsers
  return _respond(MatchSession.from_text(payload.lobbyText, payload.resultText, config))


@app.post("/ocr/bgmi/classify", response_model=ClassifyResponse)
async def bgmi_classify(images: List[UploadFile] = File(...), config: EngineConfig = Depends(get_config)):
  texts = await _read_texts(images)
  return ClassifyResponse(images=[
    ClassifiedImage(index=i, filename=img.filename, label=classify_text(t, config),
                    counts=keyword_counts(t, config))
    for i, (img, t) in enumerate(zip(images, texts))
  ])


@app.post("/ocr/bgmi/auto", response_model=ExtractResponse)
async def bgmi_auto(images: List[UploadFile] = File(...), config: EngineConfig = Depends(get_config)):
  texts = await _read_texts(images)
  lobby_text, result_text, dropped = group_texts(texts, config=config)
  session = MatchSession.from_text(lobby_text, result_text, config)
  session.dropped = dropped
  return _respond(session)

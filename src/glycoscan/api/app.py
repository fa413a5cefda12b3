"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from glycoscan.api.models import (
    AnalysisResponse,
    AnalyzeImageRequest,
    ExtractTextRequest,
    ExtractTextResponse,
    ImpactRequest,
    ImpactResponse,
)
from glycoscan.app_logging import configure_logging
from glycoscan.config import parse_cors_origins
from glycoscan.containers import AppContainer
from glycoscan.services.analysis import OcrUnavailableError
from glycoscan.services.glycemic import (
    absolute_curve,
    calculate_nutrient_metrics,
    estimate_blood_sugar_impact,
)
from glycoscan.services.ocr import ImageDecodeError, OcrError, TextNotFoundError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    origins = parse_cors_origins(container.settings.cors_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type"],
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/analyze-image", response_model=AnalysisResponse)
    async def analyze_image(
        payload: AnalyzeImageRequest, request: Request
    ) -> AnalysisResponse:
        """Run OCR on a label photo and extract its nutrition facts."""
        state_container: AppContainer = request.app.state.container
        try:
            analysis = await state_container.analysis_service.analyze_image(
                payload.image_data, payload.country
            )
        except ImageDecodeError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except TextNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except OcrUnavailableError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        except (OcrError, httpx.HTTPError) as exc:
            logger.exception("OCR request failed")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail="OCR request failed"
            ) from exc
        logger.info(
            "Analyzed label image: method=%s confidence=%s",
            analysis.extraction_method,
            analysis.confidence,
        )
        return AnalysisResponse.from_analysis(analysis)

    @app.post("/api/extract", response_model=ExtractTextResponse)
    async def extract_text(
        payload: ExtractTextRequest, request: Request
    ) -> ExtractTextResponse:
        """Extract nutrition facts from already recognized label text."""
        state_container: AppContainer = request.app.state.container
        analysis = await state_container.analysis_service.analyze_text(
            payload.text, payload.country
        )
        return ExtractTextResponse.from_analysis(analysis)

    @app.post("/api/impact", response_model=ImpactResponse)
    async def impact(payload: ImpactRequest) -> ImpactResponse:
        """Estimate the blood sugar response to one serving."""
        metrics = calculate_nutrient_metrics(payload.nutrition.to_record())
        estimate = estimate_blood_sugar_impact(metrics)
        absolute = (
            absolute_curve(estimate, payload.baseline)
            if payload.baseline is not None
            else None
        )
        return ImpactResponse.build(estimate, metrics, absolute)

    return app

# api_server.py
"""
FastAPI server exposing the LegalScore tools and resources.

Tools are invoked with POST /tools/{name} and answer with a text content
block holding the JSON result. Pipeline errors map to HTTP status codes:
oracle and judgment failures 502, configuration and history failures 500.
"""
import sys
import os
import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()
# Add the src directory to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config_manager import configure_logging, get_config
from errors import ConfigurationError, MalformedJudgment, OracleFailure, ScoreboardError
from evaluation_framework import LegalAnalysisEvaluationFramework
from legal_analyzer import LegalAnalyzer
from legal_types import ClassificationOptions, LegalDocument, SummarizationOptions
from llm_client import LLMClient
from sample_scenarios import scenarios_resource
from scoreboard_types import ScoringConfig

logger = logging.getLogger(__name__)

SAMPLE_SCENARIOS_URI = "legal://sample-scenarios"

RESOURCES = [
    {
        "uri": SAMPLE_SCENARIOS_URI,
        "name": "Sample Legal Scenarios",
        "description": "Collection of diverse legal scenarios for testing",
        "mimeType": "application/json",
    }
]

ERROR_STATUS = {
    OracleFailure: 502,
    MalformedJudgment: 502,
    ConfigurationError: 500,
}


class _ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class SummarizeArguments(_ToolArguments):
    document: LegalDocument
    options: SummarizationOptions = Field(default_factory=SummarizationOptions)


class ClassifyArguments(_ToolArguments):
    document: LegalDocument
    options: ClassificationOptions = Field(default_factory=ClassificationOptions)


class AnalyzeArguments(_ToolArguments):
    document: LegalDocument


class EvaluateArguments(_ToolArguments):
    document: LegalDocument
    expected_legal_area: Optional[str] = Field(None, alias="expectedLegalArea")
    # merged over scoring.defaults from config.yaml before validation
    config: Optional[Dict[str, Any]] = None


class NoArguments(_ToolArguments):
    pass


class LegalScoreService:
    """Lazily wires the LLM client, analyzer and evaluation framework"""

    def __init__(self, llm_client=None):
        self.llm_client = llm_client
        self.analyzer: Optional[LegalAnalyzer] = None
        self.framework: Optional[LegalAnalysisEvaluationFramework] = None
        self.initialized = False

    async def initialize(self):
        if self.initialized:
            return
        print("[SERVICE] Initializing LegalScore components...")
        analyzer_client = self.llm_client
        if self.llm_client is None:
            try:
                analyzer_client = LLMClient(model_type="analyzer")
                self.llm_client = LLMClient(model_type="evaluator")
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        self.analyzer = LegalAnalyzer(analyzer_client)
        self.framework = LegalAnalysisEvaluationFramework(self.llm_client, analyzer=self.analyzer)
        self.initialized = True
        print("[SERVICE] LegalScore service initialized successfully")

    async def summarize(self, args: SummarizeArguments):
        return (await self.analyzer.summarize_document(args.document, args.options)).to_dict()

    async def classify(self, args: ClassifyArguments):
        return (await self.analyzer.classify_document(args.document, args.options)).to_dict()

    async def analyze_full(self, args: AnalyzeArguments):
        return (await self.analyzer.analyze_document_full(args.document)).to_dict()

    async def evaluate(self, args: EvaluateArguments):
        config = ScoringConfig.from_defaults(args.config) if args.config is not None else None
        report = await self.framework.run_comprehensive_evaluation(
            args.document, args.expected_legal_area, config
        )
        return report.to_dict()

    async def performance_summary(self, args: NoArguments):
        return self.framework.performance_summary().to_dict()


@dataclass
class ToolSpec:
    name: str
    description: str
    arguments: Type[_ToolArguments]
    handler: Callable[[LegalScoreService, Any], Awaitable[Any]]

    def descriptor(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.arguments.model_json_schema(by_alias=True),
        }


TOOLS: Dict[str, ToolSpec] = {spec.name: spec for spec in (
    ToolSpec(
        "summarize_legal_document",
        "Summarize a legal document with key facts, holdings, and reasoning",
        SummarizeArguments, LegalScoreService.summarize,
    ),
    ToolSpec(
        "classify_legal_document",
        "Classify a legal document into legal areas (Contract, Tax, Constitutional, Property, "
        "Tort, Securities, Criminal, Administrative)",
        ClassifyArguments, LegalScoreService.classify,
    ),
    ToolSpec(
        "analyze_legal_document_full",
        "Perform both summarization and classification of a legal document",
        AnalyzeArguments, LegalScoreService.analyze_full,
    ),
    ToolSpec(
        "evaluate_legal_analysis",
        "Analyze a legal document and grade the analysis with a scoreboard, insights and recommendations",
        EvaluateArguments, LegalScoreService.evaluate,
    ),
    ToolSpec(
        "get_performance_summary",
        "Summarize scoreboard history: evaluation count, average score, tier distribution and trend",
        NoArguments, LegalScoreService.performance_summary,
    ),
)}


def _text_content(result: Any) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": json.dumps(result, indent=2, ensure_ascii=False)}]}


def _status_for(exc: ScoreboardError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(service: Optional[LegalScoreService] = None) -> FastAPI:
    service = service or LegalScoreService()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await service.initialize()
        except ConfigurationError as e:
            # Tools retry initialization on first call
            logger.warning(f"LegalScore service not initialized at startup: {e}")
        yield

    app = FastAPI(
        title="LegalScore API",
        description="Legal document analysis with AI scoreboard evaluation",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ScoreboardError)
    async def scoreboard_error_handler(request: Request, exc: ScoreboardError):
        status = _status_for(exc)
        logger.error(f"{request.url.path} failed with {type(exc).__name__}: {exc}")
        return JSONResponse(status_code=status, content={"error": type(exc).__name__, "detail": str(exc)})

    @app.get("/tools")
    async def list_tools():
        return {"tools": [spec.descriptor() for spec in TOOLS.values()]}

    @app.post("/tools/{name}")
    async def call_tool(name: str, arguments: Dict[str, Any] = Body(default={})):
        spec = TOOLS.get(name)
        if spec is None:
            raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")

        try:
            args = spec.arguments.model_validate(arguments)
            await service.initialize()
            result = await spec.handler(service, args)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=json.loads(e.json(include_url=False)))

        if get_config().is_decision_logging_enabled():
            print(f"[API][TOOL] {name} ok")
        return _text_content(result)

    @app.get("/resources")
    async def list_resources():
        return {"resources": RESOURCES}

    @app.get("/resources/read")
    async def read_resource(uri: str):
        if uri != SAMPLE_SCENARIOS_URI:
            raise HTTPException(status_code=404, detail=f"Unknown resource: {uri}")
        return {
            "contents": [{
                "uri": uri,
                "mimeType": "application/json",
                "text": json.dumps(scenarios_resource(), indent=2, ensure_ascii=False),
            }]
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "LegalScore API",
            "initialized": service.initialized,
        }

    @app.get("/")
    async def root():
        return {
            "message": "LegalScore API Server",
            "version": "1.0.0",
            "endpoints": {
                "tools": "/tools",
                "call_tool": "/tools/{name}",
                "resources": "/resources",
                "read_resource": "/resources/read?uri=...",
                "health": "/health",
            },
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    configure_logging()
    cfg = get_config()
    uvicorn.run(app, host=cfg.get('api.host', '0.0.0.0'), port=int(cfg.get('api.port', 8000)))

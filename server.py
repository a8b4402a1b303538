#!/usr/bin/env python3
"""
Wooly backend: fabric scoring and AI recommendations over HTTP.

Endpoints:
  GET  /health                 Liveness check
  POST /api/score              Score composition text (no AI needed)
  POST /api/recommendations    Sustainable-alternative recommendation (OpenAI)
  POST /api/chat               Short answer about the product being viewed (OpenAI)

Usage:
    python server.py              # http://127.0.0.1:3000
    python server.py --port 5001

Requires OPENAI_API_KEY in .env for the AI endpoints.
"""
import argparse
import asyncio
import os
import sys
from pathlib import Path

# Ensure project root is on path for src imports
sys.path.insert(0, str(Path(__file__).resolve().parent))

from flask import Flask, jsonify, request
from flask_cors import CORS
from rich.console import Console

from config.settings import config
from src.ai import FabricRecommender, PageContext
from src.pipeline import FabricScoringPipeline
from src.scoring import rating_for_score

console = Console()

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = config.server.max_content_length
CORS(
    app,
    origins=config.server.cors_origins,
    methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

# Text scoring never scrapes, so the pipeline's provider is never used here
pipeline = FabricScoringPipeline()


def make_recommender() -> FabricRecommender:
    """Recommender for one request (replaced in tests)."""
    return FabricRecommender()


def ai_error_response(error: Exception, fallback: str):
    """Map an OpenAI error to the (body, status) the extension expects."""
    code = getattr(error, "code", None)
    status = getattr(error, "status_code", None)

    if code == "invalid_api_key":
        return (
            jsonify({"success": False, "error": "Server configuration error. Please contact support."}),
            500,
        )
    if code == "insufficient_quota":
        return (
            jsonify(
                {
                    "success": False,
                    "error": "AI service temporarily unavailable. The OpenAI quota has been exceeded.",
                }
            ),
            503,
        )
    if status == 429:
        return (
            jsonify({"success": False, "error": "Too many requests. Please try again in a moment."}),
            429,
        )
    return jsonify({"success": False, "error": fallback}), 500


@app.route("/health")
def health():
    return jsonify(
        {
            "status": "ok",
            "message": "Wooly backend is running!",
            "ai_configured": bool(config.ai.api_key or os.getenv("OPENAI_API_KEY")),
        }
    )


@app.route("/api/score", methods=["POST"])
def score():
    """Score composition text.

    Body: {"text": "...", "sectioned": true|false (optional)}
    """
    data = request.get_json(silent=True) or {}
    text = data.get("text")

    if not isinstance(text, str) or not text.strip():
        return jsonify({"success": False, "error": "Composition text is required"}), 400

    sectioned = data.get("sectioned")
    if sectioned is not None and not isinstance(sectioned, bool):
        return jsonify({"success": False, "error": "sectioned must be a boolean"}), 400

    result = pipeline.score_text(text, sectioned=sectioned)
    body = result.to_dict()
    body["success"] = True
    body["tier"] = rating_for_score(result.score).to_dict()
    return jsonify(body)


@app.route("/api/recommendations", methods=["POST"])
def recommendations():
    """Recommend a more sustainable alternative.

    Body: {"productName": "...", "materials": [{"name", "percentage"}], "price"?, "site"?}
    """
    data = request.get_json(silent=True) or {}
    product_name = data.get("productName")

    if not product_name:
        return jsonify({"success": False, "error": "Product name is required"}), 400

    async def run():
        async with make_recommender() as recommender:
            return await recommender.recommend(
                product_name,
                data.get("materials") or [],
                price=data.get("price"),
                site=data.get("site"),
            )

    try:
        rec = asyncio.run(run())
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Recommendation service not configured: {e}[/red]")
        return (
            jsonify({"success": False, "error": "Server configuration error. Please contact support."}),
            500,
        )
    except Exception as e:
        console.print(f"[red]API Error: {e}[/red]")
        return ai_error_response(e, "Failed to generate recommendation. Please try again.")

    body = rec.to_dict()
    body["success"] = True
    return jsonify(body)


@app.route("/api/chat", methods=["POST"])
def chat():
    """Answer a question about the product on screen.

    Body: {"question": "...", "pageContext": {"productName", "price", "materials", "site"}?}
    """
    data = request.get_json(silent=True) or {}
    question = data.get("question")

    if not question:
        return jsonify({"success": False, "error": "Question is required"}), 400

    context = PageContext.from_dict(data.get("pageContext"))

    async def run():
        async with make_recommender() as recommender:
            return await recommender.answer(question, context)

    try:
        answer = asyncio.run(run())
    except Exception as e:
        console.print(f"[red]Chat API Error: {e}[/red]")
        if getattr(e, "code", None) == "insufficient_quota":
            return jsonify(
                {"success": False, "error": "OpenAI quota exceeded. Add credits to your account."}
            )
        return jsonify({"success": False, "error": "Could not get response from AI."})

    return jsonify({"success": True, "answer": answer})


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Wooly fabric scoring backend")
    parser.add_argument(
        "--host",
        type=str,
        default=config.server.host,
        help=f"Interface to bind (default: {config.server.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.server.port,
        help=f"Port to run the server on (default: {config.server.port})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()

    console.print(f"\n[bold green]🐑 Wooly backend running on http://{args.host}:{args.port}[/bold green]")
    console.print(f"[dim]   Health check: http://{args.host}:{args.port}/health[/dim]")

    if not (config.ai.api_key or os.getenv("OPENAI_API_KEY")):
        console.print("[yellow]⚠️  WARNING: OPENAI_API_KEY not set in .env file![/yellow]")

    app.run(host=args.host, port=args.port, debug=args.debug)

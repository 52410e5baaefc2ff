"""Prompt templates and builder for AI report enrichment.

Pure: the same snapshot and baseline always yield the same prompt. No
validation happens here; provider output is sanitized by the merge step.
"""

import json

from repo_health.domain.entities.report import Report
from repo_health.domain.entities.snapshot import Snapshot

MAX_PROMPT_FILES = 10
MAX_SNIPPET_CHARS = 1700

OUTPUT_SCHEMA = """{
  "summary": "string",
  "categories": {
    "maintainability": 0-100,
    "reliability": 0-100,
    "security": 0-100,
    "documentation": 0-100,
    "architecture": 0-100
  },
  "risk": {
    "score": 0-100,
    "level": "Low|Moderate|Elevated|Critical",
    "dominantRisks": ["string"]
  },
  "topIssues": [
    {
      "file": "string",
      "title": "string",
      "description": "string",
      "severity": "Critical|High|Medium|Low",
      "recommendation": "string"
    }
  ],
  "priorityFixes": [
    {
      "file": "string",
      "suggestion": "string",
      "impact": "High|Medium",
      "effort": "Low|Medium|High",
      "rationale": "string"
    }
  ],
  "quickWins": ["string"],
  "strengths": ["string"],
  "nextMilestones": ["string"]
}"""

REPORT_PROMPT = """You are a principal software quality reviewer. You are helping generate a production-style repository health report.
Use the local baseline as a starting point, then improve it with better prioritization and clearer recommendations.

Return ONLY valid JSON with this shape:
{schema}

BASELINE REPORT:
{baseline}

PROJECT SNAPSHOT:
{snapshot}
"""


def condense_snapshot(snapshot: Snapshot) -> dict:
    """Project metadata plus the first files, each cut to a fixed character budget."""
    return {
        "project": snapshot.project.model_dump(mode="json", by_alias=True),
        "files": [
            {"path": f.path, "snippet": f.content[:MAX_SNIPPET_CHARS]}
            for f in snapshot.files[:MAX_PROMPT_FILES]
        ],
    }


def build_report_prompt(snapshot: Snapshot, baseline: Report) -> str:
    return REPORT_PROMPT.format(
        schema=OUTPUT_SCHEMA,
        baseline=json.dumps(baseline.to_wire(), indent=2, ensure_ascii=False),
        snapshot=json.dumps(condense_snapshot(snapshot), indent=2, ensure_ascii=False),
    )

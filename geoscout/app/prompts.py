"""Messages sent to the remote decision engine."""

from __future__ import annotations

import json
from typing import Dict, List, Mapping, Sequence

from geoscout.app.contract import MAX_DISPLAY_MESSAGE_CHARS, HistoryTurn, Observation, UIDirective
from geoscout.app.knowledge import VISUAL_CRITERIA


def _knowledge_base_lines() -> List[str]:
    return [
        f"{idx}. {criterion.category}: {', '.join(criterion.standard_options)}."
        for idx, criterion in enumerate(VISUAL_CRITERIA, start=1)
    ]


def _escape_hatch_lines() -> List[str]:
    return [
        f"   * {criterion.category} -> " + " OR ".join(f'"{hatch}"' for hatch in criterion.escape_hatches)
        for criterion in VISUAL_CRITERIA
    ]


def build_system_prompt() -> str:
    directives = " | ".join(f'"{d.value}"' for d in UIDirective if d != UIDirective.START)
    lines = [
        "You are GeoScout, a UI-constrained geology field assistant.",
        "",
        "YOUR ROLE",
        "Guide the user to identify a mineral using strict VISUAL OBSERVATION only.",
        "You DO NOT chat. You interact via structured UI components.",
        "",
        "KNOWLEDGE BASE (STRICT VISUAL CRITERIA - PRIORITY ORDER)",
        *_knowledge_base_lines(),
        "",
        "CORE CONSTRAINTS",
        f"1. display_message MUST be <= {MAX_DISPLAY_MESSAGE_CHARS} characters.",
        "2. Output exactly ONE valid JSON object. No prose, no markdown.",
        '3. If confidence > 0.8, move to "conclusion".',
        "4. options MUST be drawn from the Knowledge Base lists above.",
        "",
        'CRITICAL RULE: THE "UNIVERSAL ESCAPE HATCH"',
        '- You MUST append a "Skip/Negative" option to EVERY SINGLE question.',
        "- The user must NEVER be trapped without a button to click.",
        "- Use these specific mappings for the escape hatch:",
        *_escape_hatch_lines(),
        "",
        "LOGIC PROTOCOL (STRICT)",
        '1. Analyze the "current_observation".',
        "2. Map inputs to Knowledge Base categories -> MARK AS COMPLETED.",
        "3. SELECT highest-priority MISSING category.",
        "4. GENERATE options (Standard Options + 1 Escape Hatch Option).",
        "5. If user selects the Escape Hatch, mark that category as COMPLETED and proceed.",
        "",
        "OUTPUT FORMAT (STRICT JSON):",
        "{",
        f'  "display_message": "string (<={MAX_DISPLAY_MESSAGE_CHARS} chars)",',
        f'  "ui_directive": {directives},',
        '  "progress": number (0-100),',
        '  "confidence": number (0.0-1.0),',
        '  "options": ["string"],',
        '  "identified_mineral": "string or null",',
        '  "completed_categories": ["string"]',
        "}",
    ]
    return "\n".join(lines)


SYSTEM_PROMPT = build_system_prompt()


def build_state_message(observations: Mapping[str, Observation]) -> str:
    return json.dumps(
        {
            "action": "update_state",
            "OBSERVED_FACTS": ", ".join(observations.keys()),
            "current_observation": {key: obs.model_dump() for key, obs in observations.items()},
        },
        ensure_ascii=False,
    )


def build_messages(history: Sequence[HistoryTurn], observations: Mapping[str, Observation]) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        *({"role": turn.role, "content": turn.content} for turn in history),
        {"role": "user", "content": build_state_message(observations)},
    ]


__all__ = ["SYSTEM_PROMPT", "build_system_prompt", "build_state_message", "build_messages"]

"""Prompt construction for every generation kind."""
import json
from typing import List, Optional

# Token budgets per generation kind
ASSESSMENT_MAX_TOKENS = 1024
MENTOR_MAX_TOKENS = 1024
PLAN_MAX_TOKENS = 4096
MEETING_EXTRACT_MAX_TOKENS = 1500
FOLLOWUPS_MAX_TOKENS = 1024

SYSTEM_PROMPT = """You are an AI assistant for Cago, a career clarity product.

YOUR CORE PURPOSE:
Help people who have already chosen a direction but feel uncertain. Provide the kind of clarity that comes from feeling understood and seeing a situation mapped out plainly.

PRODUCT PHILOSOPHY:
- This is NOT a generic career test or motivational tool
- Users have already picked a direction but feel unsure or underprepared
- Clarity comes before recommendation
- Reflection comes before action
- Progress should feel calm, not overwhelming

PERSONALIZATION:
- Read their background carefully and extract specific details
- Reference their actual experience, not generic statements
- Generic advice gives no clarity. Personalized insight does.

TONE & LANGUAGE RULES:
- Calm, intelligent, reassuring, structured, human
- Prefer "may", "tends to", "often" over definitive statements
- NEVER use exclamation marks, hype words, "best", "perfect", "you should", "amazing", "incredible"
- NEVER say "lack", "behind", "weak", or imply failure
- Avoid buzzwords and corporate speak

SUCCESS = "I'm less confused than before"

Always answer with a single JSON object and nothing else."""


def _situation(direction_label: str, background: str, confidence: str, adjustments: Optional[str] = None) -> str:
    lines = [
        f"- Direction: {direction_label}",
        f"- Background (read carefully): {background}",
        f"- Confidence: {confidence}",
    ]
    if adjustments:
        lines.append(f"- They added: {adjustments}")
    return "\n".join(lines)


def build_assessment_prompt(direction_label: str, background: str, confidence: str) -> str:
    return f"""Generate a deeply personalized "You Are Here" career assessment.

USER'S INPUT:
{_situation(direction_label, background, confidence)}

PERSONALIZATION RULES:
1. Extract specific details from their background (years, tools, industries, education, projects)
2. Reference these specifics in the assessment
3. If they mentioned specific tools or skills, include them in assets

OUTPUT (JSON only):
{{
  "stage": {{
    "label": "One of: 'Early Exploration', 'Building Foundation', 'Active Development', 'Transition Ready', or a fitting one",
    "description": "One sentence about where THEY are. Reference their background."
  }},
  "assets": [
    {{"text": "Something specific they already have", "signal": "Why it matters for their direction"}}
  ],
  "gaps": [
    {{"text": "What is not yet in place (never say lack/missing/behind)", "note": "Normalize it"}}
  ],
  "readiness": [
    {{"name": "Clarity of direction", "level": "developing/moderate/high", "note": "Based on their confidence"}},
    {{"name": "Foundational knowledge", "level": "developing/moderate/high", "note": "Based on their learning"}},
    {{"name": "Practical experience", "level": "developing/moderate/high", "note": "Based on their work"}}
  ],
  "transition": "Gentle transition that acknowledges their situation. No advice."
}}

RULES:
- 2-4 assets, each referencing something specific from their background
- 2-3 gaps maximum
- This is observation, not advice

Return ONLY valid JSON."""


def build_mentor_prompt(direction_label: str, background: str, confidence: str, adjustments: Optional[str] = None) -> str:
    return f"""Create a personalized mentor recommendation with specific session prep.

USER'S SITUATION:
{_situation(direction_label, background, confidence, adjustments)}

TASK:
1. Recommend a mentor whose experience addresses THIS user's gaps
2. Describe what the session will cover, based on their situation
3. Suggest specific questions they could ask
4. Tell them exactly what to prepare

OUTPUT (JSON only):
{{
  "mentor": {{
    "name": "Realistic full name",
    "title": "Role at Company",
    "experience": "X years in [relevant field]",
    "initials": "XX",
    "specialties": ["3 areas relevant to the user's gaps"],
    "approach": "One sentence about mentoring style"
  }},
  "matchReasons": [{{"title": "Specific reason", "text": "2-3 sentences referencing THEIR background"}}],
  "sessionExpectations": [{{"topic": "Topic", "outcome": "What they will understand after", "why": "Why it matters for them"}}],
  "questionsToAsk": [{{"question": "Specific question", "context": "Why it matters for them"}}],
  "whatToPrepare": [{{"item": "Thing to prepare", "why": "How it helps", "howTo": "Brief instruction"}}]
}}

RULES:
- 2-3 match reasons, 3 session expectations, 3-4 questions, 2-3 preparation items
- Be specific to their background, never generic

Return ONLY valid JSON."""


def build_plan_prompt(direction_label: str, background: str, confidence: str, adjustments: Optional[str] = None) -> str:
    return f"""Create a personalized, actionable 90-day execution plan.

USER'S SITUATION:
{_situation(direction_label, background, confidence, adjustments)}

OUTPUT (JSON only):
{{
  "directionConfirmation": "2-3 sentences connecting their background to this direction.",
  "hardSkills": [
    {{"skill": "Name", "why": "Why it matters for them", "priority": "essential/important/foundational/have",
      "currentLevel": "Where they are", "targetLevel": "Where to be", "resource": "One specific resource", "practiceProject": "One project idea"}}
  ],
  "softSkills": [{{"skill": "Name", "why": "Why it matters", "dailyPractice": "Daily habit"}}],
  "tools": [{{"name": "Tool", "why": "Why needed", "getStarted": "First step"}}],
  "phasedPath": {{
    "day30": {{"theme": "Foundation", "goals": ["Goal"], "tasks": [{{"task": "Task", "deliverable": "Output", "estimatedHours": "X hours"}}], "milestone": "Success marker"}},
    "day60": {{"theme": "Building", "goals": ["Goal"], "tasks": [{{"task": "Task", "deliverable": "Output", "estimatedHours": "X hours"}}], "milestone": "Success marker"}},
    "day90": {{"theme": "Momentum", "goals": ["Goal"], "tasks": [{{"task": "Task", "deliverable": "Output", "estimatedHours": "X hours"}}], "milestone": "Success marker"}}
  }},
  "weeklyActions": [{{"action": "Habit", "frequency": "How often", "why": "Why"}}],
  "quickWins": [{{"action": "Do today", "impact": "Why", "steps": ["Step 1", "Step 2"]}}],
  "potentialBlockers": [{{"blocker": "Challenge", "solution": "How to overcome"}}],
  "successMetrics": [{{"metric": "Measure", "target30": "30-day", "target60": "60-day", "target90": "90-day"}}],
  "closingReassurance": "2-3 encouraging sentences referencing their background."
}}

RULES:
- 4 hard skills, 3 soft skills, 4 tools, 3 tasks per phase
- 2 quick wins, 2 blockers, 2 metrics, 2 weekly actions
- Keep responses concise but actionable

Return ONLY valid JSON, no markdown."""


def build_meeting_extract_prompt(notes: str, title: Optional[str] = None) -> str:
    title_line = f"Meeting title: {title}\n" if title else ""
    return f"""Extract what matters from these meeting notes or transcript for someone working through a career transition.

{title_line}NOTES:
\"\"\"
{notes}
\"\"\"

OUTPUT (JSON only):
{{
  "summary": "2-3 calm sentences on what was discussed",
  "highlights": ["Key insight or piece of advice"],
  "actionItems": [
    {{"text": "Concrete next step", "priority": "high/medium/low", "due": "When, e.g. 'This week'"}}
  ]
}}

RULES:
- 3-5 highlights, taken from the notes, never invented
- Only action items that the notes support
- If the notes are thin, keep lists short rather than padding them

Return ONLY valid JSON."""


def build_followups_prompt(recent_meetings: List[dict], current_meeting: Optional[dict], user_context: Optional[dict]) -> str:
    history = [
        {
            "title": m.get("title"),
            "date": m.get("date"),
            "summary": m.get("summary"),
            "actionItems": m.get("actionItems", []),
        }
        for m in recent_meetings
    ]
    context = user_context or {}

    return f"""Suggest gentle, specific follow-ups based on this person's recent mentoring conversations.

USER CONTEXT:
- Direction: {context.get('directionLabel') or context.get('direction') or 'not shared'}
- Background: {context.get('background') or 'not shared'}

CURRENT MEETING:
{json.dumps(current_meeting or {}, indent=2)}

RECENT MEETINGS (newest first):
{json.dumps(history, indent=2)}

OUTPUT (JSON only):
{{
  "context": "One sentence on the pattern across their conversations",
  "suggestions": [
    {{"action": "Specific next step", "reason": "Why now", "priority": "high/medium/low", "timing": "When"}}
  ]
}}

RULES:
- 3-4 suggestions
- Build on open action items rather than repeating them

Return ONLY valid JSON."""

"""Versioned prompt and response-schema contract.

The prompt tells the model which JSON shapes it may answer with; the parser
expects exactly those shapes; the cache namespaces its records by the same
version.  ``SCHEMA_VERSION`` is the single knob: bump it whenever
``RESPONSE_SCHEMA`` changes and every previously cached record becomes
unreachable.
"""

from __future__ import annotations

from langchain_core.prompts import ChatPromptTemplate

SCHEMA_VERSION = 3

CACHE_KEY_PREFIX = f"startup_safety_cache_v{SCHEMA_VERSION}_"

# -- Schema ------------------------------------------------------------------

RESPONSE_SCHEMA = """\
#### OPTION A: SINGLE MODE (one company)
{
  "mode": "single",
  "report": {
    "companyProfile": {
      "name": "string", "founded": "string (year)", "location": "string (City, Country)",
      "product": "string (one sentence)", "useCase": "string",
      "lastFunding": "string (e.g. 'Oct 2023 - $50M - Series B')"
    },
    "stabilityScore": {
      "score": "number 0-100",
      "riskLevel": "Low | Medium | High",
      "verdict": "Strong Buy | Reasonable Bet | Caution"
    },
    "careerImpact": {
      "learning": "High | Med | Low", "brand": "High | Med | Low",
      "wlb": "High | Med | Low", "jobSecurity": "High | Med | Low",
      "compUpside": "High | Med | Low", "visaSafety": "High | Med | Low"
    },
    "summary": {
      "upside": "string", "redFlags": "string",
      "unknowns": "string", "guardianTake": "string (one sentence of advice)"
    },
    "recommendedReads": [
      {"title": "string", "uri": "string", "source": "string", "summary": "string"}
    ],
    "pillars": [
      {
        "id": 1, "title": "Money & Survival Time", "weight": "25%",
        "status": "Green | Yellow | Red", "summary": "string",
        "details": {"Cash Left in the Bank": "string", "Burn Rate": "string",
                    "Recent Layoffs (Last 12 Months)": "string"},
        "revenueData": [{"year": "2021", "revenue": "number (millions USD)"}]
      },
      {
        "id": 6, "title": "Founder Competence", "weight": "7%",
        "status": "Green | Yellow | Red", "summary": "string",
        "details": {"Founder": "string", "Background": "string"},
        "founderSocials": [{"platform": "LinkedIn", "uri": "string"}],
        "founderContent": [{"title": "string", "uri": "string", "source": "string"}]
      },
      {
        "id": 7, "title": "Do People Like the Product?", "weight": "5%",
        "status": "Green | Yellow | Red", "summary": "string",
        "details": {"Customers": "string", "Real User Feedback": "string"},
        "userBaseData": [{"year": "string", "users": "number"}]
      }
    ],
    "transparency": {"penalty": "number", "missingData": ["string"]},
    "visaSafety": {"h1bSponsor": "Yes | No | Unsure", "greenCard": "Yes | No | Unsure",
                   "eVerify": "Yes | No | Unsure"}
  }
}
Pillar ids: 1 Money, 2 Big Tech Risk, 3 Team Stability, 4 Work-Life Balance,
5 Comp & Equity, 6 Founder Competence, 7 Do People Like the Product,
8 Tech Debt, 9 Market Opportunity, 10 Manager Quality.
All ten pillars must be present and their weights must add up to 100%.

#### OPTION B: BATTLE MODE (comparison of two or more companies)
{
  "mode": "battle",
  "comparison": {
    "companies": ["Company A", "Company B"],
    "rows": [
      {"feature": "Money Left",
       "companyValues": {"Company A": "18 mo runway", "Company B": "Profitable"},
       "winner": "Company B"}
    ],
    "guardianVerdict": "string (short paragraph naming the winner and why)"
  }
}
Include rows for Money Left, Visa Help, Salary, WLB and Stability Score.
"winner" is one of the listed companies or "Tie".

#### OPTION C: AMBIGUOUS
{"mode": "ambiguous", "isAmbiguous": true, "ambiguousOptions": ["Option A", "Option B"]}
"""

SYSTEM_PROMPT = (
    "You are the Startup Career Guide. You help people make safe career "
    "decisions by analysing startups with live web search. Use a consistent "
    "scoring rubric: for similar financial and market conditions the "
    "stability score must be reproducible."
)

REPORT_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SYSTEM_PROMPT),
        (
            "human",
            "## Query\n"
            "{query}\n\n"
            "## Instructions\n"
            "1. Search the web for real-time data about the query.\n"
            "2. Detect the mode: one company -> SINGLE; several companies "
            "compared (e.g. 'Stripe vs Uber') -> BATTLE; a name that matches "
            "several distinct companies -> AMBIGUOUS.\n"
            "3. Reply with one strictly valid JSON object in exactly one of "
            "the shapes below. No markdown fences, no prose.\n\n"
            "## JSON response format (schema v{version})\n"
            "{schema}",
        ),
    ]
)


def build_messages(query: str) -> list:
    """Render the report prompt for *query* into LangChain messages."""
    return REPORT_PROMPT.format_messages(
        query=query,
        schema=RESPONSE_SCHEMA,
        version=SCHEMA_VERSION,
    )

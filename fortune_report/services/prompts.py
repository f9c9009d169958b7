from ..schemas.fortune import FortuneRequest

REPORT_YEAR = 2026

# The front-end colours the Dos & Don'ts bullets by matching these prefixes,
# so they stay in English whatever the report language is.
DO_PREFIX = "Do:"
DONT_PREFIX = "Don't:"

REPORT_SECTIONS = (
    "Overview",
    "Career and Wealth",
    "Family and Relationships",
    "Energy and Health",
    "Personal Growth and Hurdles",
    f"Practical Dos & Don'ts for {REPORT_YEAR}",
)
DOS_AND_DONTS_SECTION = REPORT_SECTIONS[-1]

SYSTEM_PROMPT = (
    f"You are an experienced feng shui and astrology consultant creating friendly, practical "
    f"{REPORT_YEAR} readings for entertainment. You never give medical, legal, or financial advice. "
    f"You avoid fear-based or deterministic forecasts and instead focus on gentle guidance, "
    f"describing tendencies and energy rather than certainties."
)

LANGUAGE_INSTRUCTIONS = {
    "en": (
        "Write the entire report in English. Keep the HTML structure and section headings consistent. "
        f"In the '{DOS_AND_DONTS_SECTION}' section, each bullet must start with '{DO_PREFIX}' or "
        f"'{DONT_PREFIX}' so the front-end can colour them."
    ),
    "zh": (
        "Write the entire report in natural, fluent Simplified Chinese suitable for readers in Singapore. "
        "Keep the HTML structure and section headings consistent. "
        f"IMPORTANT: In the '{DOS_AND_DONTS_SECTION}' section, keep the bullet labels beginning with "
        f"'{DO_PREFIX}' and '{DONT_PREFIX}' in English exactly as written so the front-end can style them; "
        "the rest of each sentence should be in Simplified Chinese."
    ),
}

REPORT_TEMPLATE = """\
Please generate a personalised {year} Auspicious Year Report for the following person, \
using a light blend of feng shui, astrology and numerology themes.

Date of birth: {dob}

Tone:
- Use a warm, encouraging, grounded tone. Keep it modern, positive and practical.
- Avoid fatalistic, deterministic or overly superstitious wording; speak of tendencies and energy.
- Do not give medical, legal or financial advice or make claims in those areas.
- Do not ask for or refer to any personal data beyond the date of birth above.

Structure the report using HTML with the following sections, in this order:

{sections}

HTML requirements:
- Return ONLY an HTML fragment, with no <html>, <head> or <body> wrapper and no Markdown.
- Use <h2> or <h3> for section headings.
- Use <p> for paragraphs.
- For the "{dos_section}" section, use <ul> and <li>.
- Each bullet in that section must start with "{do_prefix}" or "{dont_prefix}" exactly, followed by the advice sentence.
- Overall length should feel like a one-page reading: meaningful but not overly long.

Language rule:
{language_instruction}
"""


def build_prompt(request: FortuneRequest) -> str:
    """Render the user prompt for a validated request. Pure and deterministic."""
    sections = "\n".join(
        f"{index}) {title}" + ("  (this must be a bullet list)" if title == DOS_AND_DONTS_SECTION else "")
        for index, title in enumerate(REPORT_SECTIONS, start=1)
    )
    return REPORT_TEMPLATE.format(
        year=REPORT_YEAR,
        dob=request.dob,
        sections=sections,
        dos_section=DOS_AND_DONTS_SECTION,
        do_prefix=DO_PREFIX,
        dont_prefix=DONT_PREFIX,
        language_instruction=LANGUAGE_INSTRUCTIONS[request.language],
    )

"""Prompt templates for TLDR and chapter generation."""

SYSTEM_PROMPTS = {
    "en": """You are an expert at analyzing video content. Your task is to write a brief summary (TLDR) and a list of chapters with timestamps.

Requirements:
1. The TLDR is 2-3 sentences describing the main point of the video
2. Chapters carry precise timestamps in MM:SS or HH:MM:SS format
3. Chapter titles are informative and reflect the content of that section
4. The answer is a JSON object

Respond ONLY in English.""",

    "ru": """Ты эксперт по анализу видеоконтента. Твоя задача: написать краткое содержание (TLDR) и список глав с временными метками.

Требования:
1. TLDR состоит из 2-3 предложений о главной сути видео
2. У глав точные временные метки в формате MM:SS или HH:MM:SS
3. Названия глав информативны и отражают содержание раздела
4. Ответ в формате JSON

Отвечай ТОЛЬКО на русском языке.""",

    "es": """Eres un experto en análisis de contenido de video. Tu tarea es escribir un resumen breve (TLDR) y una lista de capítulos con marcas de tiempo.

Requisitos:
1. El TLDR tiene 2-3 oraciones sobre la idea principal del video
2. Los capítulos llevan marcas de tiempo precisas en formato MM:SS o HH:MM:SS
3. Los títulos de los capítulos son informativos y reflejan el contenido de esa sección
4. La respuesta es un objeto JSON

Responde SOLO en español.""",
}

USER_PROMPT_TEMPLATE = """Analyze the following video transcript and produce:

1. A TLDR (a very short summary)
2. A list of chapters with timestamps

Transcript:
{transcript}

Answer with JSON exactly in this shape:
{{
  "tldr": "Short summary of the video in 2-3 sentences",
  "chapters": [
    {{"time": "00:00", "title": "Introduction"}},
    {{"time": "02:30", "title": "Main topic"}}
  ]
}}

IMPORTANT:
- Timestamps use MM:SS or HH:MM:SS format
- Timestamps are realistic for the transcript content
- Chapter titles are descriptive and specific
- Answer with JSON only, no extra text"""


def get_system_prompt(language: str) -> str:
    """System prompt for ``language``; unknown codes get the English prompt."""
    return SYSTEM_PROMPTS.get((language or "").lower(), SYSTEM_PROMPTS["en"])


def build_user_prompt(transcript: str) -> str:
    return USER_PROMPT_TEMPLATE.format(transcript=transcript)

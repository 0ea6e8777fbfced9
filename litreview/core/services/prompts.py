"""Prompt templates for the structured extraction model."""

from ..domain import CardExtraction

EXTRACTION_PROMPT = """Extrae datos de investigación sobre IA en educación. Este es el fragmento {position}/{total}.
IMPORTANTE: Diferencia claramente entre el Resumen (qué se hizo) y las Conclusiones (qué se determinó al final).
Sugiere exactamente entre 4 y 5 etiquetas.

TEXTO:
---
{chunk}
---"""

CONSOLIDATION_PROMPT = """Sintetiza estos fragmentos en un registro académico único.
Asegúrate de tener un Resumen integrador y una sección de Conclusiones sólida.

DATOS:
---
{data}
---"""


def build_extraction_prompt(chunk: str, total_chunks: int, chunk_index: int) -> str:
    """Prompt for one fragment; positions are shown 1-based."""
    return EXTRACTION_PROMPT.format(position=chunk_index + 1, total=total_chunks, chunk=chunk)


def build_consolidation_prompt(partials: list[CardExtraction]) -> str:
    """Prompt listing the topic/summary/conclusions triple of every partial."""
    data = "\n\n".join(
        f"T: {partial.topic}\nR: {partial.summary}\nC: {partial.conclusions}"
        for partial in partials
    )
    return CONSOLIDATION_PROMPT.format(data=data)

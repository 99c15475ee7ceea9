"""
llm_query/prompt.py — prompt for the occurrence extractor.

The extraction rules are part of the backend contract (header format,
upper-case names without diacritics, full narrative including LinkGeo), so
they are fixed here and not configurable per call.

Public API:
  build_prompt(text, template)  -> str
  read_text(path)               -> str
"""

from __future__ import annotations

import pathlib

PROMPT_TEMPLATE = """\
Extraia as ocorrências policiais deste texto para JSON.
REGRAS CRÍTICAS DE IDENTIFICAÇÃO:
1. id: Capture o cabeçalho COMPLETO da ocorrência exatamente como aparece no início de cada registro.
   PADRÃO OBRIGATÓRIO: [Número] - [Data Hora] - [Unidade-Referência]
   EXEMPLO: "49294 - 20/12/2025 06:00:13 - 10BPM-19DEZ2025-03"
   NÃO altere a ordem e NÃO remova o sufixo da unidade.

OUTRAS REGRAS:
2. isCrime: true para crimes reais (tráfico, roubo, agressão), false para extravios ou acidentes simples sem crime.
3. Envolvidos: Apenas AUTORES/SUSPEITOS. NOME e MÃE em CAIXA ALTA SEM ACENTO.
4. Narrativa: COPIE INTEGRALMENTE o texto da narrativa. A narrativa SEMPRE começa com "No dia..." e deve ser capturada ATÉ O FINAL, incluindo OBRIGATORIAMENTE o endereço/link do "linkgeo" (ex: "LinkGeo: https://...") que é o último item de cada ocorrência. Não interrompa a narrativa antes de capturar este link.
5. FORMATAÇÃO: Certifique-se de que todas as aspas e quebras de linha dentro da narrativa estejam devidamente escapadas para um JSON válido.

TEXTO:
{{TEXT}}"""


def build_prompt(text: str, template: str = PROMPT_TEMPLATE) -> str:
    """Fills the {{TEXT}} placeholder with a sub-batch's text."""
    return template.replace("{{TEXT}}", text)


def read_text(path: str | pathlib.Path) -> str:
    """Reads a UTF-8 text file (manual input)."""
    return pathlib.Path(path).read_text(encoding="utf-8")

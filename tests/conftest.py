"""
Pytest configuration and fixtures for SUMINFO tests.
"""

from __future__ import annotations

import pytest

from data_model import InvolvedPerson, PoliceOccurrence

ROBBERY_ID = "49294 - 20/12/2025 06:00:13 - 10BPM-19DEZ2025-03"
NOISE_ID   = "49301 - 20/12/2025 07:30:00 - 10BPM-20DEZ2025-02"
CRASH_ID   = "49310 - 20/12/2025 08:15:00 - 10BPM-20DEZ2025-01"

ROBBERY_NARRATIVE = (
    "No dia 19/12/2025, por volta das 22h, a guarnição foi acionada para a Rua das Flores, "
    "onde a vítima relatou ter sido abordada pelo acusado, que subtraiu seu telefone celular. "
    "LinkGeo: https://linkgeo.example/abc"
)

ROBBERY_PAGE = (
    "RESERVADO\n"
    "GOVERNO DO ESTADO DO RIO DE JANEIRO\n"
    "SECRETARIA DE ESTADO DA POLÍCIA MILITAR\n"
    f"{ROBBERY_ID}\n"
    "UNIDADE: ROUBO A TRANSEUNTE\n"
    "ACUSADO: João da Silva\n"
    "CPF: 123.456.789-01\n"
    "DATA DE NASCIMENTO: 01/02/1990\n"
    "MÃE: Maria da Silva\n"
    f"{ROBBERY_NARRATIVE}\n"
)

NOISE_PAGE = (
    "RESERVADO\n"
    f"{NOISE_ID}\n"
    "UNIDADE: PERTURBAÇÃO DO SOSSEGO\n"
    "No dia 20/12/2025 a guarnição compareceu ao local e orientou os moradores.\n"
)

CRASH_PAGE = (
    "RESERVADO\n"
    f"{CRASH_ID}\n"
    "UNIDADE: ACIDENTE DE TRÂNSITO SEM VÍTIMA\n"
    "No dia 20/12/2025 houve colisão entre dois veículos na via pública.\n"
)

CONTINUATION_PAGE = (
    "RESERVADO\n"
    "continuação do relato anterior, sem novo cabeçalho.\n"
)

WIRE_RECORD = {
    "id": ROBBERY_ID,
    "date": "20/12/2025",
    "fact": "ROUBO",
    "isCrime": True,
    "narrative": "No dia 19/12/2025 ...",
    "involved": [
        {"name": "JOAO", "cpf": "12345678901", "birthDate": "01/02/1990",
         "motherName": "MARIA", "condition": "Identificado"},
    ],
}


def make_occurrence(
    occ_id: str = ROBBERY_ID,
    fact: str = "ROUBO A TRANSEUNTE",
    is_crime: bool = True,
    narrative: str = ROBBERY_NARRATIVE,
    involved: list[InvolvedPerson] | None = None,
    date: str = "20/12/2025",
) -> PoliceOccurrence:
    return PoliceOccurrence(
        id=occ_id,
        date=date,
        fact=fact,
        is_crime=is_crime,
        narrative=narrative,
        involved=involved if involved is not None else [],
    )


@pytest.fixture
def robbery() -> PoliceOccurrence:
    """A crime record with one fully identified person."""
    return make_occurrence(involved=[
        InvolvedPerson(
            name="JOAO DA SILVA",
            cpf="12345678901",
            birth_date="01/02/1990",
            mother_name="MARIA DA SILVA",
            condition="Identificado",
        )
    ])


@pytest.fixture
def sample_pages() -> list[str]:
    """Three occurrences (one a traffic accident) plus a continuation page."""
    return [ROBBERY_PAGE, CONTINUATION_PAGE, NOISE_PAGE, CRASH_PAGE]

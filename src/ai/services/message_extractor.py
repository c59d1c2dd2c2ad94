"""Extração determinística de dados da mensagem do cliente (regex).

Usada pelo cliente heurístico para montar argumentos: nome, e-mail,
documento, número de hóspedes, cidade, comodidades, código de
transação e horário.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from utils.text import digits_only, normalize_text

_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# CPF (11) ou CNPJ (14), com ou sem pontuação
_DOCUMENT_PATTERN = re.compile(
    r"\b\d{2}\.?\d{3}\.?\d{3}/?\d{4}-?\d{2}\b|\b\d{3}\.?\d{3}\.?\d{3}-?\d{2}\b"
)

_NAME_PATTERNS = [
    re.compile(
        r"(?:meu nome [ée]|me chamo|sou o|sou a|nome completo:?)\s+"
        r"([A-Za-zÀ-ÿ]+(?:\s+(?:d[aeo]s?\s+)?[A-Za-zÀ-ÿ]+){0,4})",
        re.IGNORECASE,
    ),
]

_GUESTS_PATTERN = re.compile(
    r"\b(\d{1,2}|um|uma|dois|duas|tres|quatro|cinco|seis|sete|oito|nove|dez)\s+"
    r"(?:pessoas?|hospedes?|adultos?)\b"
)

_NUMBER_WORDS = {
    "um": 1,
    "uma": 1,
    "dois": 2,
    "duas": 2,
    "tres": 3,
    "quatro": 4,
    "cinco": 5,
    "seis": 6,
    "sete": 7,
    "oito": 8,
    "nove": 9,
    "dez": 10,
}

# Cidade após "em"/"para"; para antes de números, pontuação ou conectivos
_CITY_PATTERN = re.compile(
    r"\b(?:em|no|na|para|pra)\s+"
    r"([a-zà-ÿ]+(?:\s+(?:d[aeo]s?\s+)?[a-zà-ÿ]+){0,3}?)"
    r"(?=\s*(?:$|[,.!?;]|\s+(?:para|pra|com|de|do|da|no|na|por|em|entre|ate|até|\d)\b))"
)

_CITY_STOPWORDS = frozenset({
    "a",
    "o",
    "um",
    "uma",
    "minha",
    "sua",
    "alugar",
    "casa",
    "apartamento",
    "imovel",
    "temporada",
    "pessoas",
    "mim",
    "gente",
    "familia",
    "janeiro",
    "fevereiro",
    "marco",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
    "dia",
    "semana",
    "fim",
    "ferias",
})

_AMENITIES = {
    "piscina": "piscina",
    "wifi": "wifi",
    "wi-fi": "wifi",
    "internet": "wifi",
    "churrasqueira": "churrasqueira",
    "ar condicionado": "ar-condicionado",
    "ar-condicionado": "ar-condicionado",
    "garagem": "garagem",
    "estacionamento": "garagem",
    "vista para o mar": "vista para o mar",
    "vista mar": "vista para o mar",
    "pet": "aceita pets",
    "cachorro": "aceita pets",
}

# Código com ao menos um dígito no primeiro bloco ("pagamento" não é código)
_TRANSACTION_PATTERN = re.compile(
    r"\b((?:tx|trx|pag|pay)[-_]?(?=[a-z]*\d)[a-z0-9]{2,}(?:-[a-z0-9]+)*)\b"
)
_REASON_PATTERN = re.compile(r"\b(?:porque|pois|motivo:?)\s+(.{3,})$")


@dataclass(frozen=True, slots=True)
class ClientData:
    """Dados de cadastro encontrados na mensagem (None quando ausentes)."""

    name: str | None = None
    document: str | None = None
    email: str | None = None

    @property
    def complete(self) -> bool:
        return bool(self.name and self.document and self.email)


def extract_email(text: str) -> str | None:
    match = _EMAIL_PATTERN.search(text)
    return match.group(0).lower() if match else None


def extract_document(text: str) -> str | None:
    """CPF ou CNPJ só com dígitos."""
    without_email = _EMAIL_PATTERN.sub(" ", text)
    match = _DOCUMENT_PATTERN.search(without_email)
    return digits_only(match.group(0)) if match else None


def extract_name(text: str) -> str | None:
    """Nome após "meu nome é", "me chamo" etc."""
    for pattern in _NAME_PATTERNS:
        match = pattern.search(text)
        if match:
            name = " ".join(match.group(1).split())
            if len(name) >= 2:
                return name.title()
    return None


def extract_client_data(text: str) -> ClientData:
    return ClientData(
        name=extract_name(text),
        document=extract_document(text),
        email=extract_email(text),
    )


def extract_guests(text: str) -> int | None:
    """Número de hóspedes ("2 pessoas", "quatro hóspedes")."""
    match = _GUESTS_PATTERN.search(normalize_text(text))
    if not match:
        return None
    token = match.group(1)
    return int(token) if token.isdigit() else _NUMBER_WORDS[token]


def extract_city(text: str) -> str | None:
    """Cidade citada na mensagem, preservando acentos do original.

    Busca no texto em minúsculas (não normalizado) para devolver
    "florianópolis" e não "florianopolis".
    """
    lowered = " ".join(text.lower().split())
    for match in _CITY_PATTERN.finditer(lowered):
        candidate = match.group(1).strip()
        if normalize_text(candidate).split()[0] in _CITY_STOPWORDS:
            continue
        return candidate.title().replace(" Da ", " da ").replace(" De ", " de ").replace(
            " Do ", " do "
        )
    return None


def extract_amenities(text: str) -> list[str]:
    normalized = normalize_text(text)
    found: list[str] = []
    for keyword, amenity in _AMENITIES.items():
        if keyword in normalized and amenity not in found:
            found.append(amenity)
    return found


def extract_transaction_id(text: str) -> str | None:
    match = _TRANSACTION_PATTERN.search(text.lower())
    return match.group(1) if match else None


def extract_reason(text: str) -> str | None:
    """Motivo após "porque", "pois" ou "motivo"."""
    match = _REASON_PATTERN.search(" ".join(text.split()))
    return match.group(1).strip(" .!") if match else None


def extract_ordinal(text: str) -> int | None:
    """Posição citada ("o primeiro", "a opção 2") como índice 1-based."""
    normalized = normalize_text(text)
    for word, position in _ORDINALS.items():
        if re.search(rf"\b{word}\b", normalized):
            return position
    match = re.search(r"\b(?:opcao|numero|n[oº]|imovel)\s*(\d)\b", normalized)
    if match:
        return int(match.group(1))
    return None


_ORDINALS = {
    "primeir[oa]": 1,
    "segund[oa]": 2,
    "terceir[oa]": 3,
    "ultim[oa]": -1,
}

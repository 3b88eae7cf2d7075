"""Built-in seed data used on first run and whenever stored data is unreadable."""

from __future__ import annotations

from faqdesk.core.history import created_entry
from faqdesk.core.models import FaqRecord

DEFAULT_SYSTEMS: tuple[str, ...] = (
    "Secullum Ponto Web",
    "Secullum Ponto Offline",
    "Secullum Acesso",
    "Secullum Academia",
    "Secullum Escola",
    "Secullum Clube",
    "Secullum Estacionamento",
    "Diversos",
    "Secullum Ponto Virtual",
    "Secullum Acesso Controlador",
    "Ponto Secullum 3",
    "Ponto Secullum 4",
    "Secullum Ponto Web Gateway",
)

DEFAULT_CATEGORIES: tuple[str, ...] = ("Suporte", "Comercial")

DEFAULT_TYPES: tuple[str, ...] = (
    "Erro",
    "SQL",
    "Instalação",
    "Cálculos",
    "Configuração Equipamento",
    "Equipamentos Integrados",
    "Configuração em Geral",
    "Portaria",
    "Políticas",
    "Exposec",
    "Webinar",
    "Comunicação Equipamentos",
)


def seed_records(now: int) -> list[FaqRecord]:
    """Return the demo collection, stamped with *now*."""
    return [
        FaqRecord(
            id="1",
            reference_number="685",
            url="https://www.secullum.com.br/pf?id=685",
            title="Erro ao comunicar com equipamento Henry",
            raw_content=(
                "Ao tentar comunicar apresenta erro de timeout. "
                "Verifique cabeamento e configurações de IP."
            ),
            summary=(
                "O erro de timeout geralmente indica falhas físicas no cabeamento ou "
                "configurações de rede (IP/Porta) incorretas no equipamento Henry."
            ),
            private_notes="Verificar se o firewall está bloqueando a porta 3000.",
            system="Ponto Secullum 4",
            category="Suporte",
            type="Comunicação Equipamentos",
            created_at=now,
            history=(created_entry(now),),
        )
    ]

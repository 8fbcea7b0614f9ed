"""Rangliste nach Durchschnitt.

Gleichstände werden nicht zusammengefasst: die Ränge laufen lückenlos 1..N,
bei gleichem Schnitt entscheidet die Eingabereihenfolge (stabile Sortierung).
Wer eine bestimmte Reihenfolge bei Gleichstand will (z.B. nach Name),
sortiert die Eingabe vorher.
"""

from typing import Iterable

from pydantic import BaseModel


class RankingEntry(BaseModel):
    """Ein Platz in der Rangliste."""

    rank: int          # 1-basiert, lückenlos
    student_id: str
    average: float


def rank_students(pairs: Iterable[tuple[str, float]]) -> list[RankingEntry]:
    """Sortiert (student_id, durchschnitt)-Paare absteigend nach Durchschnitt.

    Nur Schüler mit mindestens einer Note übergeben; Schüler ohne Note
    haben keinen Durchschnitt und gehören nicht in die Rangliste.
    """
    ordered = sorted(pairs, key=lambda p: p[1], reverse=True)
    return [
        RankingEntry(rank=i, student_id=sid, average=avg)
        for i, (sid, avg) in enumerate(ordered, start=1)
    ]


def top_k(ranking: list[RankingEntry], k: int) -> list[RankingEntry]:
    """Die ersten k Plätze einer fertigen Rangliste (reine Ansicht)."""
    if k < 0:
        raise ValueError(f"k muss >= 0 sein (ist {k})")
    return ranking[:k]

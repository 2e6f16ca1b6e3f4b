# settleup/utils/split.py
# Деление суммы между участниками в целых минорных единицах.
# Сумма долей всегда равна исходной; остаток раздаём по одной единице первым N.

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping


def equal_split(total: int, count: int) -> List[int]:
    """
    floor(total/count) каждому, первым total % count — на единицу больше.
    equal_split(1000, 3) == [334, 333, 333]. При count <= 0 — пустой список.
    """
    if count <= 0:
        return []
    base, remainder = divmod(total, count)
    return [base + 1 if i < remainder else base for i in range(count)]


def equal_split_among(total: int, participant_ids: Iterable[str]) -> Dict[str, int]:
    """То же, но по id в порядке вызывающего (дубликаты схлопываются)."""
    ids = list(dict.fromkeys(participant_ids))
    return dict(zip(ids, equal_split(total, len(ids))))


def shares_split(total: int, weights: Mapping[str, int]) -> Dict[str, int]:
    # split_type='shares': пропорционально числу долей, участники с весом <= 0 не участвуют
    items = [(uid, int(w)) for uid, w in weights.items() if int(w) > 0]
    if not items:
        return {}
    weight_sum = sum(w for _, w in items)
    out = {uid: total * w // weight_sum for uid, w in items}
    leftover = total - sum(out.values())
    for uid, _ in items[:leftover]:
        out[uid] += 1
    return out

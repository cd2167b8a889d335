"""
Simulación de carreras de palomas.

generate_pigeon_race_result() calcula, a partir de las stats de la paloma y la
configuración de la carrera, la velocidad base y un guion de eventos con su
minuto (boosts, frenazos, pérdida). No guarda nada en DB, solo lógica pura.

distance_at_minute() reproduce ese guion para saber cuántos km lleva la paloma
en un minuto dado. Lo usan la clasificación en vivo y la repetición.
"""
import math
import random

from pigeon_prestige.core.config import settings
from pigeon_prestige.schemas.pigeon import PigeonStats
from pigeon_prestige.schemas.race import PigeonRaceResult, RaceConfig, RaceEvent


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_base_speed(stats: PigeonStats) -> float:
    return 0.8 * stats.speed + 0.2 * stats.endurance


def generate_pigeon_race_result(
    stats: PigeonStats,
    race_config: RaceConfig,
    rng: random.Random | None = None,
) -> PigeonRaceResult:
    if race_config.distance_km <= 0:
        raise ValueError("La distancia de la carrera debe ser positiva")

    base_speed = calculate_base_speed(stats)
    if base_speed <= 0:
        raise ValueError(f"Velocidad base no válida para la paloma {stats.id}: {base_speed}")

    rng = rng or random.Random()
    duration = round_half_up(race_config.distance_km / base_speed * 60)
    events: list[RaceEvent] = []

    # 1. Eventos fijos según stats
    if stats.endurance < 50:
        events.append(RaceEvent(t=round_half_up(duration * 0.4), effect="slowdown", mod=0.8, reason="tired legs"))

    if stats.speed > 70:
        events.append(RaceEvent(t=duration - 100, effect="boost", mod=1.2, reason="final sprint"))

    if race_config.weather.wind > 20 and stats.aerodynamics < 50:
        events.append(RaceEvent(t=round_half_up(duration * 0.6), effect="slowdown", mod=0.7, reason="strong headwind"))

    # 2. Se pierde (corta la carrera, no se evalúa nada más)
    if stats.sky_iq < 30 and rng.random() < settings.lost_probability:
        events.append(RaceEvent(t=round_half_up(duration * 0.5), effect="lost", mod=0, reason="got lost"))
        return PigeonRaceResult(
            pigeon_id=stats.id,
            start_time=race_config.start_time,
            duration=None,
            distance_km=race_config.distance_km,
            base_speed=base_speed,
            events=sorted(events, key=lambda e: e.t),
            stats=stats,
            did_not_finish=True,
        )

    # 3. Final milagroso
    if stats.morale > 80 and rng.random() < settings.miracle_probability:
        events.append(RaceEvent(t=duration - 10, effect="recovery", mod=1.5, reason="miracle finish"))

    return PigeonRaceResult(
        pigeon_id=stats.id,
        start_time=race_config.start_time,
        duration=duration,
        distance_km=race_config.distance_km,
        base_speed=base_speed,
        events=sorted(events, key=lambda e: e.t),
        stats=stats,
    )


def _speed_segments(result: PigeonRaceResult):
    """
    Devuelve tramos (minuto_inicio, velocidad) ordenados. Un evento 'lost'
    deja la velocidad a 0 desde su minuto.
    """
    speed = result.base_speed
    segments = [(0, speed)]
    for event in result.events:
        if event.effect == "lost":
            speed = 0.0
        else:
            speed *= event.mod
        # Los eventos con minuto negativo cuentan desde la salida
        start = max(event.t, 0)
        if segments[-1][0] == start:
            segments[-1] = (start, speed)
        else:
            segments.append((start, speed))
    return segments


def distance_at_minute(t: float, result: PigeonRaceResult) -> float:
    if result.did_not_finish or result.duration is None:
        return 0.0
    if t <= 0:
        return 0.0
    if any(event.effect == "lost" and t >= event.t for event in result.events):
        return 0.0

    covered = 0.0
    segments = _speed_segments(result)
    for i, (start, speed) in enumerate(segments):
        if t <= start:
            break
        end = segments[i + 1][0] if i + 1 < len(segments) else t
        covered += (min(t, end) - start) / 60 * speed

    return min(covered, result.distance_km)


def finish_minute(result: PigeonRaceResult) -> float | None:
    """
    Minuto en el que la paloma llega a meta reproduciendo sus eventos.
    None si no termina.
    """
    if result.did_not_finish or result.duration is None:
        return None

    covered = 0.0
    segments = _speed_segments(result)
    for i, (start, speed) in enumerate(segments):
        end = segments[i + 1][0] if i + 1 < len(segments) else math.inf
        if speed <= 0:
            continue
        needed = (result.distance_km - covered) / speed * 60
        if start + needed <= end:
            return start + needed
        covered += (end - start) / 60 * speed
    return None


def calculate_standings(results: list[PigeonRaceResult], minute: float) -> list[dict]:
    """
    Clasificación en un minuto dado: más km recorridos primero.
    """
    standings = []
    for result in results:
        covered = distance_at_minute(minute, result)
        standings.append({
            "pigeon_id": result.pigeon_id,
            "distance_km": covered,
            "distance_left": max(result.distance_km - covered, 0.0),
            "finished": not result.did_not_finish and covered >= result.distance_km,
            "did_not_finish": result.did_not_finish,
        })
    return sorted(standings, key=lambda s: s["distance_km"], reverse=True)

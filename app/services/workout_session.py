"""
Движок активной тренировочной сессии.

Состояния: Idle → Active ⇄ Paused → Idle. Сессия хранится только в памяти,
одновременно активна одна. Время отсчитывает внешний планировщик:
сессия лишь взводит и снимает периодические вызовы tick()/rest_tick()
синхронно со сменой состояния.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Union

from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import InvalidStateError
from app.schemas.routine import RoutineSeed
from app.schemas.session import (
    ExerciseToAdd,
    InitialExercise,
    SessionExercise,
    SessionState,
    SessionType,
    SetEntry,
    Suggestion,
    TargetSet,
)
from app.schemas.workout import WorkoutCreate, WorkoutExerciseCreate, WorkoutSetCreate
from app.services.rest_timer import RestTimer, round_half_up
from app.services.scheduler import Clock, IntervalHandle, IntervalScheduler, wall_clock

logger = logging.getLogger(__name__)

Confirm = Optional[Callable[[], bool]]

EDITABLE_SET_FIELDS = ("reps", "weight", "weight_unit", "rest_sec")


class WorkoutSession:
    def __init__(
        self,
        scheduler: Optional[IntervalScheduler] = None,
        clock: Clock = wall_clock,
        default_rest_sec: int = settings.DEFAULT_REST_SEC,
        default_weight_unit: str = settings.DEFAULT_WEIGHT_UNIT,
        tick_seconds: float = settings.SESSION_TICK_SECONDS,
        rest_tick_seconds: float = settings.REST_TICK_SECONDS,
    ):
        self._scheduler = scheduler
        self._clock = clock
        self._default_rest_sec = default_rest_sec
        self._default_weight_unit = default_weight_unit
        self._tick_seconds = tick_seconds
        self._clock_handle: Optional[IntervalHandle] = None
        self._state = SessionState()
        self.rest = RestTimer(
            on_finish=self._write_actual_rest,
            clock=clock,
            scheduler=scheduler,
            tick_seconds=rest_tick_seconds,
        )

    # ==========================
    # ЧТЕНИЕ СОСТОЯНИЯ
    # ==========================

    @property
    def active(self) -> bool:
        return self._state.active

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def type(self) -> Optional[SessionType]:
        return self._state.type

    @property
    def duration_sec(self) -> int:
        return self._state.duration_sec

    def snapshot(self) -> SessionState:
        """Копия состояния для отрисовки; изменения копии на сессию не влияют."""
        state = self._state.model_copy(deep=True)
        state.rest_timer = self.rest.state.model_copy(deep=True)
        return state

    def get_exercise(self, exercise_type_id: int) -> SessionExercise:
        for exercise in self._state.exercises:
            if exercise.exercise_type_id == exercise_type_id:
                return exercise
        raise InvalidStateError(f"Упражнение {exercise_type_id} отсутствует в сессии")

    def get_set(self, exercise_type_id: int, set_index: int) -> SetEntry:
        exercise = self.get_exercise(exercise_type_id)
        if set_index < 0 or set_index >= len(exercise.sets):
            raise InvalidStateError(
                f"Подход {set_index} отсутствует у упражнения {exercise_type_id}"
            )
        return exercise.sets[set_index]

    # ==========================
    # ЖИЗНЕННЫЙ ЦИКЛ
    # ==========================

    def start_custom_session(
        self,
        initial_exercises: Optional[Iterable[Union[InitialExercise, dict]]] = None,
    ) -> None:
        self._require_idle()

        exercises: List[SessionExercise] = []
        seen = set()
        for raw in initial_exercises or []:
            item = InitialExercise.model_validate(raw)
            if item.exercise_type_id in seen:
                continue
            seen.add(item.exercise_type_id)

            if item.sets:
                sets = [
                    SetEntry(
                        reps=s.reps,
                        weight=s.weight,
                        weight_unit=s.weight_unit or self._default_weight_unit,
                        rest_sec=s.rest_sec,
                    )
                    for s in item.sets
                ]
            else:
                sets = [SetEntry(weight_unit=self._default_weight_unit)]

            exercises.append(SessionExercise(
                exercise_type_id=item.exercise_type_id,
                name=item.name,
                sets=sets,
            ))

        self._state = SessionState(
            active=True,
            type=SessionType.custom,
            started_at=self._clock(),
            exercises=exercises,
        )
        logger.info(f"Начата свободная тренировка, упражнений: {len(exercises)}")
        self._sync_session_clock()

    def start_routine_session(self, seed: Union[RoutineSeed, dict]) -> None:
        self._require_idle()
        try:
            seed = RoutineSeed.model_validate(seed)
        except ValidationError as e:
            raise InvalidStateError(f"Некорректные данные программы: {e}") from e

        exercises = []
        for entry in seed.exercises:
            placeholder = entry.placeholder
            if placeholder is None:
                sets = [self._default_set()]
            else:
                suggestion = Suggestion(
                    reps=placeholder.reps if placeholder.reps is not None else 0,
                    weight=placeholder.weight if placeholder.weight is not None else 0,
                    weight_unit=placeholder.weight_unit,
                    rest_sec=(
                        placeholder.rest_sec
                        if placeholder.rest_sec is not None
                        else self._default_rest_sec
                    ),
                )
                # Подсказка только показывается: повторы и вес пользователь вводит сам
                sets = [
                    SetEntry(
                        weight_unit=suggestion.weight_unit,
                        rest_sec=suggestion.rest_sec,
                        suggested=suggestion.model_copy(),
                    )
                    for _ in range(max(1, placeholder.set_count))
                ]
            exercises.append(SessionExercise(
                exercise_type_id=entry.id,
                name=entry.name,
                sets=sets,
            ))

        self._state = SessionState(
            active=True,
            type=SessionType.routine,
            routine_id=seed.id,
            routine_name=seed.name,
            started_at=self._clock(),
            exercises=exercises,
            is_modified=False,
        )
        logger.info(f"Начата тренировка по программе {seed.id} «{seed.name}»")
        self._sync_session_clock()

    def convert_to_custom(self) -> None:
        """Необратимо превратить тренировку по программе в свободную."""
        self._require_active()
        if self._state.type != SessionType.routine:
            raise InvalidStateError("Сессия уже свободная")

        routine_id = self._state.routine_id
        self._state.type = SessionType.custom
        self._state.routine_id = None
        self._state.routine_name = ""
        self._state.is_modified = True
        for exercise in self._state.exercises:
            for entry in exercise.sets:
                entry.suggested = None
        logger.info(f"Тренировка по программе {routine_id} переведена в свободную")

    def stop_and_reset(self) -> None:
        """Сбросить сессию без сохранения. Повторный вызов ничего не делает."""
        was_active = self._state.active
        self.rest.cancel()
        self._state = SessionState()
        self._sync_session_clock()
        if was_active:
            logger.info("Сессия остановлена и сброшена")

    # ==========================
    # УПРАЖНЕНИЯ И ПОДХОДЫ
    # ==========================

    def add_exercises(
        self,
        exercises: Iterable[Union[ExerciseToAdd, dict]],
        confirm: Confirm = None,
    ) -> bool:
        """
        Добавить упражнения из каталога. Дубликаты молча пропускаются.

        Для тренировки по программе сначала нужен перевод в свободную;
        если confirm вернул False, ничего не меняется.
        """
        self._require_active()

        existing = {e.exercise_type_id for e in self._state.exercises}
        new_items = []
        for raw in exercises:
            item = ExerciseToAdd.model_validate(raw)
            if item.id in existing:
                continue
            existing.add(item.id)
            new_items.append(item)

        if not new_items:
            return False

        if not self._convert_for_structural_edit(confirm):
            return False

        for item in new_items:
            self._state.exercises.append(SessionExercise(
                exercise_type_id=item.id,
                name=item.name,
                sets=[self._default_set()],
            ))
        return True

    def remove_exercise(self, exercise_type_id: int, confirm: Confirm = None) -> bool:
        self._require_active()
        self.get_exercise(exercise_type_id)

        if not self._convert_for_structural_edit(confirm):
            return False

        self._state.exercises = [
            e for e in self._state.exercises if e.exercise_type_id != exercise_type_id
        ]
        target = self.rest.target_set
        if target is not None and target.exercise_type_id == exercise_type_id:
            self.rest.retarget(None)
        return True

    def add_set(self, exercise_type_id: int) -> None:
        self._require_active()
        self.get_exercise(exercise_type_id).sets.append(self._default_set())

    def remove_set(self, exercise_type_id: int, set_index: int) -> None:
        """У упражнения всегда остаётся хотя бы один подход."""
        self._require_active()
        exercise = self.get_exercise(exercise_type_id)
        self.get_set(exercise_type_id, set_index)

        del exercise.sets[set_index]
        if not exercise.sets:
            exercise.sets.append(self._default_set())

        target = self.rest.target_set
        if target is not None and target.exercise_type_id == exercise_type_id:
            if target.set_index == set_index:
                self.rest.retarget(None)
            elif target.set_index > set_index:
                self.rest.retarget(TargetSet(
                    exercise_type_id=exercise_type_id,
                    set_index=target.set_index - 1,
                ))

    def update_set(self, exercise_type_id: int, set_index: int, field: str, value: Any) -> None:
        self._require_active()
        if field not in EDITABLE_SET_FIELDS:
            raise InvalidStateError(f"Поле {field} нельзя менять напрямую")

        entry = self.get_set(exercise_type_id, set_index)
        if value == "":
            value = None
        try:
            setattr(entry, field, value)
        except ValidationError as e:
            raise InvalidStateError(f"Некорректное значение {field}={value!r}: {e}") from e

    def complete_set(self, exercise_type_id: int, set_index: int) -> bool:
        """
        Переключить отметку выполнения. При отметке подхода с заданным
        отдыхом запускается таймер отдыха. Возвращает новое значение.
        """
        self._require_active()
        entry = self.get_set(exercise_type_id, set_index)

        if entry.completed:
            entry.completed = False
            return False

        if not entry.is_loggable:
            raise InvalidStateError(
                f"Подход {set_index} упражнения {exercise_type_id}: не заданы повторы или вес"
            )

        entry.completed = True
        if entry.rest_sec is not None and entry.rest_sec > 0:
            self.rest.start(exercise_type_id, set_index, entry.rest_sec)
        return True

    # ==========================
    # ТАЙМЕР СЕССИИ
    # ==========================

    def tick(self, delta: int = 1) -> None:
        self._require_active()
        if delta < 0:
            raise InvalidStateError("Время сессии не может идти назад")
        if self._state.is_paused:
            return
        self._state.duration_sec += delta

    def pause_timer(self) -> None:
        self._require_active()
        self._state.is_paused = True
        self._sync_session_clock()

    def resume_timer(self) -> None:
        self._require_active()
        self._state.is_paused = False
        self._sync_session_clock()

    # ==========================
    # ТАЙМЕР ОТДЫХА
    # ==========================

    def start_rest(
        self,
        exercise_type_id: Optional[int] = None,
        set_index: Optional[int] = None,
        seconds: Optional[int] = None,
    ) -> None:
        self._require_active()
        if exercise_type_id is not None and set_index is not None:
            self.get_set(exercise_type_id, set_index)
        self.rest.start(
            exercise_type_id,
            set_index,
            self._default_rest_sec if seconds is None else seconds,
        )

    def rest_tick(self) -> None:
        self.rest.tick()

    def add_rest_seconds(self, delta: int) -> None:
        self.rest.add_seconds(delta)

    def stop_rest(self) -> None:
        self.rest.stop()

    # ==========================
    # СОХРАНЕНИЕ
    # ==========================

    @property
    def can_save(self) -> bool:
        return self._state.active and any(
            entry.completed for e in self._state.exercises for entry in e.sets
        )

    def build_save_payload(self, note: str = "", date: Optional[datetime] = None) -> WorkoutCreate:
        """
        Собрать payload для сохранения: только выполненные подходы с reps > 0,
        упражнения без таких подходов не попадают в payload.
        """
        self._require_active()

        exercises = []
        for exercise in self._state.exercises:
            sets = [
                WorkoutSetCreate(
                    reps=entry.reps,
                    weight=entry.weight or 0,
                    weight_unit=entry.weight_unit,
                    rest_sec=entry.rest_sec,
                )
                for entry in exercise.sets
                if entry.completed and entry.reps is not None and entry.reps > 0
            ]
            if sets:
                exercises.append(WorkoutExerciseCreate(
                    exercise_type_id=exercise.exercise_type_id,
                    sets=sets,
                ))

        if not exercises:
            raise InvalidStateError("Нет выполненных подходов для сохранения")

        return WorkoutCreate(
            date=date or datetime.now(timezone.utc),
            duration_min=max(1, round_half_up(self._state.duration_sec / 60)),
            note=note or "",
            exercises=exercises,
            routine_id=self._state.routine_id if self._state.type == SessionType.routine else None,
        )

    def mark_saved(self) -> None:
        """Вызывается после успешного сохранения тренировки."""
        self._require_active()
        logger.info("Тренировка сохранена, сессия сброшена")
        self.stop_and_reset()

    # ==========================
    # ВСПОМОГАТЕЛЬНОЕ
    # ==========================

    def _default_set(self) -> SetEntry:
        return SetEntry(weight_unit=self._default_weight_unit, rest_sec=self._default_rest_sec)

    def _require_active(self) -> None:
        if not self._state.active:
            raise InvalidStateError("Нет активной сессии")

    def _require_idle(self) -> None:
        if self._state.active:
            raise InvalidStateError("Уже есть активная сессия, сначала завершите её")

    def _convert_for_structural_edit(self, confirm: Confirm) -> bool:
        if self._state.type != SessionType.routine:
            return True
        if confirm is not None and not confirm():
            logger.debug("Перевод в свободную тренировку отклонён пользователем")
            return False
        self.convert_to_custom()
        return True

    def _write_actual_rest(self, target: TargetSet, actual_rest: int) -> None:
        if not self._state.active:
            return
        try:
            entry = self.get_set(target.exercise_type_id, target.set_index)
        except InvalidStateError:
            logger.debug(f"Подход {target} уже удалён, отдых {actual_rest} c не записан")
            return
        # Запланированный отдых перезаписывается фактическим
        entry.actual_rest_sec = actual_rest
        entry.rest_sec = actual_rest

    def _sync_session_clock(self) -> None:
        """Периодический tick взведён ровно тогда, когда сессия активна и не на паузе."""
        should_run = self._state.active and not self._state.is_paused
        if should_run and self._clock_handle is None and self._scheduler is not None:
            self._clock_handle = self._scheduler.call_every(self._tick_seconds, self.tick)
        elif not should_run and self._clock_handle is not None:
            self._clock_handle.cancel()
            self._clock_handle = None

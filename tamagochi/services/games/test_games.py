# tamagochi/services/games/test_games.py
import random

import pytest

from tamagochi.models.pet_stats import PetStats
from tamagochi.services.activity_log import ActivityLog
from tamagochi.services.games import GameStateError, MoodQuiz, ReflexGame, RockPaperScissors, TreasureHunt
from tamagochi.services.games.quiz import QuizQuestion, build_mood_questions
from tamagochi.services.games.rps import DRAW, LOSS, WIN, decide
from tamagochi.services.scheduler import TaskScheduler
from tamagochi.services.stat_engine import StatEngine


class FakeClock:
    def __init__(self, value=100.0):
        self.value = value

    def __call__(self):
        return self.value


class FixedRandom(random.Random):
    """choice/randrange/uniform 결과를 고정하는 Random. shuffle은 그대로 둡니다."""

    def __init__(self, choice=None, randrange=0, uniform=2.0):
        super().__init__(7)
        self._choice = choice
        self._randrange = randrange
        self._uniform = uniform

    def choice(self, seq):
        return self._choice if self._choice is not None else seq[0]

    def randrange(self, *args, **kwargs):
        return self._randrange

    def uniform(self, a, b):
        return self._uniform


@pytest.fixture
def engine():
    return StatEngine(stats=PetStats(hunger=60, energy=60, happiness=60), mood_id='kreativ',
                      activity_log=ActivityLog(initial=()))


@pytest.fixture
def scheduler(timers):
    return TaskScheduler(timer_factory=timers)


# reflex

def test_reflex_start_waits_random_delay(engine, scheduler, timers):
    game = ReflexGame(engine, scheduler, rng=random.Random(3))
    delay = game.start()

    assert 1.5 <= delay <= 4.0
    assert game.state == 'waiting'
    assert timers.active()[0].interval == delay


def test_reflex_early_click_fails_without_reaction_time(engine, scheduler, timers):
    game = ReflexGame(engine, scheduler, rng=FixedRandom())
    game.start()
    assert game.click() == 'fail'

    assert game.last_reaction_ms is None
    assert engine.stats.happiness == 57
    # 대기 타이머가 취소되었으므로 나중에 ready로 바뀌지 않습니다.
    timers.fire_all()
    assert game.state == 'fail'


def test_reflex_success_records_reaction_and_best(engine, scheduler, timers):
    clock = FakeClock()
    game = ReflexGame(engine, scheduler, rng=FixedRandom(), clock=clock)

    game.start()
    timers.fire_all()
    assert game.state == 'ready'
    clock.value += 0.321
    assert game.click() == 'success'
    assert game.last_reaction_ms == 321
    assert (engine.stats.happiness, engine.stats.energy) == (68, 58)

    game.start()
    timers.fire_all()
    clock.value += 0.5
    game.click()
    assert game.last_reaction_ms == 500
    assert game.best_reaction_ms == 321


def test_reflex_click_without_round_is_rejected(engine, scheduler, timers):
    game = ReflexGame(engine, scheduler, rng=FixedRandom(), clock=FakeClock())
    with pytest.raises(GameStateError):
        game.click()

    game.start()
    timers.fire_all()
    game.click()
    with pytest.raises(GameStateError):
        game.click()


def test_reflex_restart_supersedes_pending_timer(engine, scheduler, timers):
    game = ReflexGame(engine, scheduler, rng=FixedRandom(), clock=FakeClock())
    game.start()
    game.start()

    assert len(timers.active()) == 1
    assert timers.timers[0].cancelled


# quiz

def test_mood_quiz_has_two_questions_per_mood():
    questions = build_mood_questions()

    assert len(questions) == 8
    for question in questions:
        assert question.answer in question.options
        assert len(set(question.options)) == len(question.options)


def test_quiz_wrong_guess_keeps_question_open(engine, scheduler, timers):
    quiz = MoodQuiz(engine, scheduler, rng=random.Random(1))
    wrong = next(option for option in quiz.options if option != quiz.current.answer)

    assert quiz.guess(wrong) is False
    assert quiz.locked is False
    assert quiz.score == 0
    assert engine.stats.happiness == 59
    assert timers.active() == []


def test_quiz_correct_guess_locks_and_auto_advances(engine, scheduler, timers):
    quiz = MoodQuiz(engine, scheduler, rng=random.Random(1))
    first_prompt = quiz.current.prompt

    assert quiz.guess(quiz.current.answer) is True
    assert quiz.locked is True
    assert quiz.score == 1
    assert engine.stats.happiness == 66

    with pytest.raises(GameStateError):
        quiz.guess(quiz.current.answer)

    (advance,) = timers.active()
    assert advance.interval == 1.5
    advance.fire()

    assert quiz.locked is False
    assert quiz.asked == 1
    assert quiz.current.prompt != first_prompt


def test_quiz_manual_next_cancels_auto_advance(engine, scheduler, timers):
    quiz = MoodQuiz(engine, scheduler, rng=random.Random(1))
    quiz.guess(quiz.current.answer)
    quiz.next_question()

    assert timers.active() == []
    assert quiz.asked == 1


def test_quiz_rejects_unknown_option(engine, scheduler):
    quiz = MoodQuiz(engine, scheduler, rng=random.Random(1))
    with pytest.raises(ValueError):
        quiz.guess("Mogorva")


def test_quiz_wraps_around_question_list(engine, scheduler):
    questions = [QuizQuestion("A?", ("x", "y"), "x"), QuizQuestion("B?", ("x", "y"), "y")]
    quiz = MoodQuiz(engine, scheduler, rng=random.Random(5), questions=questions)

    seen = set()
    for _ in range(6):
        seen.add(quiz.current.prompt)
        quiz.next_question()

    assert seen == {"A?", "B?"}
    assert quiz.asked == 6
    assert 0 <= quiz.position < 2


def test_quiz_requires_questions(engine, scheduler):
    with pytest.raises(ValueError):
        MoodQuiz(engine, scheduler, questions=[])


# treasure

def test_treasure_found_increments_streak(engine, scheduler, timers):
    hunt = TreasureHunt(engine, scheduler, rng=FixedRandom(randrange=4))

    assert hunt.pick(0) == 'playing'
    assert hunt.attempts_left == 2
    assert hunt.pick(4) == 'found'
    assert (hunt.streak, hunt.best_streak, hunt.rounds) == (1, 1, 1)
    assert (engine.stats.happiness, engine.stats.energy) == (70, 57)
    assert hunt.to_dict()['target'] == 4

    (next_round,) = timers.active()
    assert next_round.interval == 2.5
    next_round.fire()
    assert hunt.status == 'playing'
    assert hunt.revealed == set()
    assert hunt.attempts_left == 3


def test_treasure_loss_resets_streak(engine, scheduler, timers):
    hunt = TreasureHunt(engine, scheduler, rng=FixedRandom(randrange=8))
    hunt.pick(8)
    timers.fire_all()

    for cell in (0, 1, 2):
        status = hunt.pick(cell)

    assert status == 'lost'
    assert hunt.streak == 0
    assert hunt.best_streak == 1
    assert engine.stats.happiness == 66


def test_treasure_hides_target_while_playing(engine, scheduler):
    hunt = TreasureHunt(engine, scheduler, rng=FixedRandom(randrange=2))
    assert hunt.to_dict()['target'] is None


def test_treasure_rejects_invalid_picks(engine, scheduler):
    hunt = TreasureHunt(engine, scheduler, rng=FixedRandom(randrange=8))

    with pytest.raises(ValueError):
        hunt.pick(9)
    hunt.pick(0)
    with pytest.raises(GameStateError):
        hunt.pick(0)

    hunt.pick(8)
    with pytest.raises(GameStateError):
        hunt.pick(1)


def test_treasure_new_round_cancels_pending_timer(engine, scheduler, timers):
    hunt = TreasureHunt(engine, scheduler, rng=FixedRandom(randrange=1))
    hunt.pick(1)
    hunt.new_round()

    assert timers.active() == []
    assert hunt.status == 'playing'
    assert hunt.streak == 1


# rps

@pytest.mark.parametrize('player, opponent, outcome', [
    ('rock', 'scissors', WIN),
    ('scissors', 'paper', WIN),
    ('paper', 'rock', WIN),
    ('rock', 'paper', LOSS),
    ('paper', 'paper', DRAW),
])
def test_rps_decide(player, opponent, outcome):
    assert decide(player, opponent) == outcome


def test_rps_round_updates_tally_and_stats(engine, scheduler):
    game = RockPaperScissors(engine, scheduler, rng=FixedRandom(choice='scissors'))

    assert game.play('rock') == {'player': 'rock', 'opponent': 'scissors', 'outcome': WIN}
    game.play('scissors')
    game.play('paper')

    assert game.tally == {WIN: 1, DRAW: 1, LOSS: 1}
    assert engine.stats.happiness == pytest.approx(60 + 7 + 2 - 2)
    assert engine.stats.energy == 58
    assert "nyertél" in engine.activity.messages[-1]


def test_rps_rejects_unknown_choice(engine, scheduler):
    with pytest.raises(ValueError):
        RockPaperScissors(engine, scheduler).play('lizard')


def test_teardown_cancels_game_timers(engine, scheduler, timers):
    reflex = ReflexGame(engine, scheduler, rng=FixedRandom())
    hunt = TreasureHunt(engine, scheduler, rng=FixedRandom(randrange=0))
    reflex.start()
    hunt.pick(0)

    reflex.teardown()
    hunt.teardown()
    assert timers.active() == []

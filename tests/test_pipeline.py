import asyncio
import math

import numpy as np
import pytest

from backend_doubles import FailingSimulatedBackend, UnavailableBackend
from seed_predictor.backends import BackendMode, BackendSelector, GameKind, SimulatedBackend
from seed_predictor.commons.seed_utils import SeedTriple
from seed_predictor.errors import BackendNotReadyError, PredictionError
from seed_predictor.pipeline import (CoinflipPipeline, CoinflipSequence, CoinSide, MinesGrid, MinesPipeline,
                                     build_pipeline, no_delay)


def _selector(config, simulated=None):
    selector = BackendSelector(UnavailableBackend(config), simulated or SimulatedBackend(config))
    asyncio.run(selector.initialize())
    return selector


def _seeds(nonce=0):
    return SeedTriple("abc", "def", nonce)


def test_mines_returns_five_by_five_grid(config):
    pipeline = MinesPipeline(_selector(config), config=config, rng=np.random.default_rng(3), delay=no_delay)
    result = asyncio.run(pipeline.run(_seeds()))

    assert isinstance(result, MinesGrid)
    assert result.mode is BackendMode.SIMULATED
    assert len(result.cells) == 5 and all(len(row) == 5 for row in result.cells)
    assert len(result.flat()) == 25
    assert all(isinstance(cell, bool) for cell in result.flat())
    assert len(result.raw_scores) == 25


def test_mines_cells_follow_safety_probability(config):
    pipeline = MinesPipeline(_selector(config), config=config, rng=np.random.default_rng(11))
    result = asyncio.run(pipeline.run(_seeds()))
    expected = np.random.default_rng(11).random((5, 5)) < config.mines_grid_safety_probability
    assert [list(row) for row in result.cells] == expected.tolist()
    assert result.safe_count == int(expected.sum())


@pytest.mark.parametrize("p_safe, safe_count", [(1.0, 25), (0.0, 0)])
def test_mines_extreme_probabilities(config, p_safe, safe_count):
    config = config.with_overrides(mines_grid_safety_probability=p_safe)
    pipeline = MinesPipeline(_selector(config), config=config)
    assert asyncio.run(pipeline.run(_seeds())).safe_count == safe_count


def test_coinflip_default_sequence(config):
    pipeline = CoinflipPipeline(_selector(config), config=config, rng=np.random.default_rng(5), delay=no_delay)
    result = asyncio.run(pipeline.run(_seeds(nonce=40)))

    assert isinstance(result, CoinflipSequence)
    assert [entry.nonce_offset for entry in result.entries] == list(range(10))
    assert [entry.nonce for entry in result.entries] == list(range(40, 50))
    assert len(result.raw_scores) == 1


def test_coinflip_confidence_is_probability_of_chosen_side(config):
    pipeline = CoinflipPipeline(_selector(config), config=config, rng=np.random.default_rng(9), delay=no_delay)
    result = asyncio.run(pipeline.run(_seeds()))
    draws = np.random.default_rng(9).random(10)

    for entry, draw in zip(result.entries, draws):
        if draw > 0.5:
            assert entry.outcome is CoinSide.HEADS
            assert entry.confidence_percent == math.floor(draw * 100)
        else:
            assert entry.outcome is CoinSide.TAILS
            assert entry.confidence_percent == math.floor((1 - draw) * 100)
        assert 50 <= entry.confidence_percent <= 100


def test_coinflip_awaits_delay_between_calls(config):
    config = config.with_overrides(coinflip_sequence_length=4, coinflip_pacing_seconds=0.25)
    waits = []

    async def record(seconds):
        waits.append(seconds)

    pipeline = CoinflipPipeline(_selector(config), config=config, delay=record)
    result = asyncio.run(pipeline.run(_seeds()))
    assert len(result.entries) == 4
    assert waits == [0.25] * 4


def test_prediction_error_propagates_and_model_is_released(config):
    failing = FailingSimulatedBackend(config)
    selector = _selector(config, simulated=failing)
    pipeline = MinesPipeline(selector, config=config)

    with pytest.raises(PredictionError):
        asyncio.run(pipeline.run(_seeds()))

    assert len(failing.models) == 1 and failing.models[0].disposed
    assert selector.current_mode() is BackendMode.SIMULATED


def test_model_released_after_success(config):
    simulated = SimulatedBackend(config)
    built = []
    original = simulated.build_model

    def tracking_build(kind):
        model = original(kind)
        built.append(model)
        return model

    simulated.build_model = tracking_build
    pipeline = CoinflipPipeline(_selector(config, simulated=simulated), config=config, delay=no_delay)
    asyncio.run(pipeline.run(_seeds()))
    assert built and all(model.disposed for model in built)


def test_pipeline_requires_initialized_selector(config):
    selector = BackendSelector(UnavailableBackend(config), SimulatedBackend(config))
    pipeline = MinesPipeline(selector, config=config)
    with pytest.raises(BackendNotReadyError):
        asyncio.run(pipeline.run(_seeds()))


def test_build_pipeline_dispatches_on_game(config):
    selector = _selector(config)
    assert isinstance(build_pipeline(GameKind.MINES, selector, config=config), MinesPipeline)
    assert isinstance(build_pipeline(GameKind.COINFLIP, selector, config=config), CoinflipPipeline)


def test_result_to_dict(config):
    pipeline = CoinflipPipeline(_selector(config), config=config, delay=no_delay)
    data = asyncio.run(pipeline.run(_seeds(nonce=7))).to_dict()
    assert data["game"] == "coinflip"
    assert data["mode"] == "simulated"
    assert data["entries"][0]["nonce"] == 7
    assert data["entries"][0]["outcome"] in ("Heads", "Tails")

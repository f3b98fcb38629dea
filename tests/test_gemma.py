import pytest

from labelscan.services import gemma
from labelscan.services.gemma import GemmaError, classify_ingredient_batch, parse_ingredient_items


@pytest.mark.parametrize(
    "reply",
    [
        '{"ingredients": [{"ingredient": "Salt"}]}',
        '```json\n{"ingredients": [{"ingredient": "Salt"}]}\n```',
        '[{"ingredient": "Salt"}]',
    ],
)
def test_parse_ingredient_items(reply):
    assert parse_ingredient_items(reply) == [{"ingredient": "Salt"}]


@pytest.mark.parametrize("reply", ["Sure! Here you go.", '{"result": "ok"}', '{"ingredients": "Salt"}'])
def test_replies_without_an_ingredient_list_are_errors(reply):
    with pytest.raises(GemmaError):
        parse_ingredient_items(reply)


async def test_primary_model_answers_the_batch(monkeypatch):
    prompts = []

    async def fake_ask(model, prompt):
        prompts.append((model.name, prompt))
        return [{"ingredient": "Salt"}]

    monkeypatch.setattr(gemma, "_ask", fake_ask)

    assert await classify_ingredient_batch(["Salt", "Water"]) == [{"ingredient": "Salt"}]
    assert len(prompts) == 1
    name, prompt = prompts[0]
    assert name == gemma._PRIMARY.name
    assert '["Salt", "Water"]' in prompt


async def test_bad_primary_reply_goes_to_fallback(monkeypatch):
    async def fake_ask(model, prompt):
        if model is gemma._PRIMARY:
            raise GemmaError("Model reply has no ingredient list")
        return [{"ingredient": "Water"}]

    monkeypatch.setattr(gemma, "_ask", fake_ask)

    assert await classify_ingredient_batch(["Water"]) == [{"ingredient": "Water"}]


async def test_both_models_failing_names_the_batch(monkeypatch):
    async def fake_ask(model, prompt):
        raise RuntimeError("429 RESOURCE_EXHAUSTED")

    monkeypatch.setattr(gemma, "_ask", fake_ask)

    with pytest.raises(GemmaError, match=r"batch of 4 \(Oats, Rice, Beans, \.\.\.\)"):
        await classify_ingredient_batch(["Oats", "Rice", "Beans", "Peas"])

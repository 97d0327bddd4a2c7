import pytest

from commander import CANCEL_INTENT, CommandNotMatched, QuestionNotFound, UnknownSlotType


@pytest.fixture
def callbacks(recorder):
    return {
        "question": recorder("question"),
        "success": recorder("success"),
        "fail": recorder("fail"),
        "cancel": recorder("cancel"),
        "not_found": recorder("not_found"),
        "guess": recorder("guess"),
    }


@pytest.fixture
def color_nlc(nlc, callbacks):
    nlc.add_slot_type({"type": "Color", "matcher": ["red", "blue", "green"], "base_matcher": r"\w+"})
    nlc.register_intent({
        "intent": "FAVORITE_COLOR_GUESS",
        "callback": callbacks["guess"],
        "slots": [{"name": "Color", "type": "Color"}],
        "utterances": ["do you like {Color}"],
    })
    nlc.register_question({
        "name": "USER_FAVORITE_COLOR",
        "slot_type": "Color",
        "question_callback": callbacks["question"],
        "success_callback": callbacks["success"],
        "fail_callback": callbacks["fail"],
        "cancel_callback": callbacks["cancel"],
    })
    nlc.register_not_found(callbacks["not_found"])
    return nlc


@pytest.mark.asyncio
async def test_ask_invokes_question_callback(color_nlc, callbacks):
    assert await color_nlc.ask("USER_FAVORITE_COLOR") == "USER_FAVORITE_COLOR"
    callbacks["question"].assert_called_with()


@pytest.mark.asyncio
async def test_answer_round_trip(color_nlc, callbacks):
    await color_nlc.ask("USER_FAVORITE_COLOR")
    assert await color_nlc.handle_command("Blue") == "USER_FAVORITE_COLOR"
    callbacks["success"].assert_called_with("Blue")
    callbacks["guess"].assert_not_called()

    # The question is over; the same reply is now just an unknown command.
    with pytest.raises(CommandNotMatched):
        await color_nlc.handle_command("blue")
    assert callbacks["success"].call_count == 1
    assert callbacks["not_found"].called


@pytest.mark.asyncio
async def test_bad_answer_fails_the_question(color_nlc, callbacks):
    await color_nlc.ask("USER_FAVORITE_COLOR")
    with pytest.raises(CommandNotMatched) as exc:
        await color_nlc.handle_command("tacos")
    assert exc.value.question == "USER_FAVORITE_COLOR"
    callbacks["fail"].assert_called_with()
    callbacks["not_found"].assert_not_called()
    callbacks["success"].assert_not_called()


@pytest.mark.asyncio
async def test_no_retry_after_a_bad_answer(color_nlc, callbacks):
    await color_nlc.ask("USER_FAVORITE_COLOR")
    with pytest.raises(CommandNotMatched):
        await color_nlc.handle_command("tacos")
    with pytest.raises(CommandNotMatched) as exc:
        await color_nlc.handle_command("blue")
    assert exc.value.question is None
    callbacks["success"].assert_not_called()


@pytest.mark.asyncio
async def test_cancel_phrase_cancels(color_nlc, callbacks):
    await color_nlc.ask("USER_FAVORITE_COLOR")
    assert await color_nlc.handle_command("Nevermind") == CANCEL_INTENT
    callbacks["cancel"].assert_called_with("Nevermind")
    callbacks["fail"].assert_not_called()
    callbacks["success"].assert_not_called()


@pytest.mark.asyncio
async def test_without_cancel_callback_cancel_phrases_are_bad_answers(nlc, callbacks):
    nlc.register_question({
        "name": "PICK_NUMBER",
        "slotType": "NUMBER",
        "questionCallback": callbacks["question"],
        "successCallback": callbacks["success"],
        "failCallback": callbacks["fail"],
    })
    await nlc.ask("PICK_NUMBER")
    with pytest.raises(CommandNotMatched):
        await nlc.handle_command("nevermind")
    callbacks["fail"].assert_called_with()


@pytest.mark.asyncio
async def test_answer_is_transformed_by_slot_type(nlc, callbacks):
    nlc.register_question({
        "name": "PICK_NUMBER",
        "slot_type": "NUMBER",
        "question_callback": callbacks["question"],
        "success_callback": callbacks["success"],
        "fail_callback": callbacks["fail"],
    })
    await nlc.ask("PICK_NUMBER")
    await nlc.handle_command("1,024")
    callbacks["success"].assert_called_with(1024)


@pytest.mark.asyncio
async def test_custom_answer_utterances(nlc, callbacks):
    nlc.register_question({
        "name": "PICK_NUMBER",
        "slot_type": "NUMBER",
        "question_callback": callbacks["question"],
        "success_callback": callbacks["success"],
        "fail_callback": callbacks["fail"],
        "utterances": ["{Slot}", "pick {Slot}"],
    })
    await nlc.ask("PICK_NUMBER")
    assert await nlc.handle_command("pick 7") == "PICK_NUMBER"
    callbacks["success"].assert_called_with(7)


@pytest.mark.asyncio
async def test_pending_question_takes_the_reply_over_ordinary_intents(color_nlc, callbacks):
    await color_nlc.ask("USER_FAVORITE_COLOR")
    with pytest.raises(CommandNotMatched) as exc:
        await color_nlc.handle_command("do you like blue")
    assert exc.value.question == "USER_FAVORITE_COLOR"
    callbacks["fail"].assert_called_with()
    callbacks["guess"].assert_not_called()
    callbacks["not_found"].assert_not_called()

    # Back to idle: the same command now reaches the intent.
    assert await color_nlc.handle_command("do you like blue") == "FAVORITE_COLOR_GUESS"
    callbacks["guess"].assert_called_with("blue")


@pytest.mark.asyncio
async def test_question_name_is_not_an_answer(color_nlc, callbacks):
    await color_nlc.ask("USER_FAVORITE_COLOR")
    with pytest.raises(CommandNotMatched):
        await color_nlc.handle_command("USER_FAVORITE_COLOR")
    callbacks["fail"].assert_called_with()


@pytest.mark.asyncio
async def test_data_flows_to_question_callbacks(color_nlc, callbacks):
    await color_nlc.ask({"question": "USER_FAVORITE_COLOR", "data": "ctx"})
    callbacks["question"].assert_called_with("ctx")
    await color_nlc.handle_command("ctx", "red")
    callbacks["success"].assert_called_with("ctx", "red")


@pytest.mark.asyncio
async def test_pending_questions_are_per_user(color_nlc, callbacks):
    await color_nlc.ask({"question": "USER_FAVORITE_COLOR", "user_id": "U1"})
    callbacks["question"].assert_called_with()

    with pytest.raises(CommandNotMatched) as exc:
        await color_nlc.handle_command({"command": "green", "user_id": "U2"})
    assert exc.value.question is None
    callbacks["not_found"].assert_called_with()

    # Anonymous commands have their own slot too.
    with pytest.raises(CommandNotMatched):
        await color_nlc.handle_command("green")

    assert await color_nlc.handle_command({"command": "green", "user_id": "U1"}) == "USER_FAVORITE_COLOR"
    callbacks["success"].assert_called_with("green")


@pytest.mark.asyncio
async def test_fresh_ask_overwrites_pending_question(nlc, color_nlc, callbacks, recorder):
    other_success = recorder("other_success")
    nlc.register_question({
        "name": "PICK_NUMBER",
        "slot_type": "NUMBER",
        "question_callback": callbacks["question"],
        "success_callback": other_success,
        "fail_callback": callbacks["fail"],
    })
    await nlc.ask("USER_FAVORITE_COLOR")
    await nlc.ask("PICK_NUMBER")
    assert await nlc.handle_command("3") == "PICK_NUMBER"
    other_success.assert_called_with(3)
    callbacks["success"].assert_not_called()


@pytest.mark.asyncio
async def test_nested_questions_from_success_callback(nlc, recorder):
    second_success = recorder("second_success")
    asked = []

    async def first_success(value):
        asked.append(value)
        await nlc.ask("SECOND")

    nlc.register_question({
        "name": "FIRST",
        "slot_type": "NUMBER",
        "question_callback": lambda: None,
        "success_callback": first_success,
        "fail_callback": lambda: None,
    })
    nlc.register_question({
        "name": "SECOND",
        "slot_type": "WORD",
        "question_callback": lambda: None,
        "success_callback": second_success,
        "fail_callback": lambda: None,
    })

    await nlc.ask("FIRST")
    assert await nlc.handle_command("1") == "FIRST"
    assert asked == [1]
    assert await nlc.handle_command("done") == "SECOND"
    second_success.assert_called_with("done")


@pytest.mark.asyncio
async def test_deregistered_question_is_no_longer_pending(color_nlc, callbacks):
    await color_nlc.ask("USER_FAVORITE_COLOR")
    assert color_nlc.deregister_question("USER_FAVORITE_COLOR")
    with pytest.raises(CommandNotMatched) as exc:
        await color_nlc.handle_command("blue")
    assert exc.value.question is None
    callbacks["success"].assert_not_called()
    assert not color_nlc.deregister_question("USER_FAVORITE_COLOR")


@pytest.mark.asyncio
async def test_deregistered_question_releases_its_slot_type(color_nlc):
    color_nlc.deregister_intent("FAVORITE_COLOR_GUESS")
    color_nlc.deregister_question("USER_FAVORITE_COLOR")
    color_nlc.remove_slot_type("Color")
    assert "Color" not in color_nlc.slot_types


@pytest.mark.asyncio
async def test_asking_unknown_question(nlc):
    with pytest.raises(QuestionNotFound):
        await nlc.ask("NOPE")


def test_question_names_are_unique(color_nlc, callbacks):
    spec = {
        "name": "USER_FAVORITE_COLOR",
        "slot_type": "Color",
        "question_callback": callbacks["question"],
        "success_callback": callbacks["success"],
        "fail_callback": callbacks["fail"],
    }
    assert not color_nlc.register_question(spec)
    assert not color_nlc.register_question({**spec, "name": "FAVORITE_COLOR_GUESS"})
    assert not color_nlc.register_intent({
        "intent": "USER_FAVORITE_COLOR",
        "callback": callbacks["guess"],
        "utterances": ["whatever"],
    })


def test_cancel_is_a_reserved_name(nlc, callbacks):
    spec = {
        "name": "CANCEL",
        "slot_type": "NUMBER",
        "question_callback": callbacks["question"],
        "success_callback": callbacks["success"],
        "fail_callback": callbacks["fail"],
        "cancel_callback": callbacks["cancel"],
    }
    assert not nlc.register_question(spec)
    assert "CANCEL" not in nlc.questions
    assert not nlc.register_intent({"intent": "CANCEL", "callback": callbacks["guess"], "utterances": ["stop it"]})
    assert "CANCEL" not in nlc.intents


def test_question_with_unknown_slot_type_leaves_nothing_behind(nlc, callbacks):
    with pytest.raises(UnknownSlotType):
        nlc.register_question({
            "name": "BROKEN",
            "slot_type": "NOPE",
            "question_callback": callbacks["question"],
            "success_callback": callbacks["success"],
            "fail_callback": callbacks["fail"],
            "cancel_callback": callbacks["cancel"],
        })
    assert "BROKEN" not in nlc.questions
    assert nlc.slot_types.users("NEVERMIND") == 0
    nlc.remove_slot_type("NEVERMIND")
    assert "NEVERMIND" not in nlc.slot_types

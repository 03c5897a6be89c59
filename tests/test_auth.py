from bson import ObjectId


def test_token_valid_for_owner(services):
    user_id = ObjectId()
    token = services.token_store.create_token(user_id)

    assert services.gate.is_valid(token, user_id)


def test_token_invalid_for_other_user(services):
    token = services.token_store.create_token(ObjectId())

    assert not services.gate.is_valid(token, ObjectId())


def test_unknown_or_missing_token_is_invalid(services):
    user_id = ObjectId()

    assert not services.gate.is_valid(ObjectId(), user_id)
    assert not services.gate.is_valid(None, user_id)
    assert not services.gate.is_valid(services.token_store.create_token(user_id), None)


def test_deleted_token_is_invalid(services):
    user_id = ObjectId()
    token = services.token_store.create_token(user_id)

    removed = services.token_store.delete_token(token)

    assert removed.user == user_id
    assert not services.gate.is_valid(token, user_id)
    assert services.token_store.delete_token(token) is None


def test_user_may_hold_several_tokens(services):
    user_id = ObjectId()
    first = services.token_store.create_token(user_id)
    second = services.token_store.create_token(user_id)

    services.token_store.delete_token(first)

    assert first != second
    assert services.gate.is_valid(second, user_id)


def test_delete_user_tokens(services):
    user_id = ObjectId()
    other = ObjectId()
    tokens = [services.token_store.create_token(user_id) for _ in range(3)]
    kept = services.token_store.create_token(other)

    assert services.token_store.delete_user_tokens(user_id) == 3
    assert not any(services.gate.is_valid(t, user_id) for t in tokens)
    assert services.gate.is_valid(kept, other)


def test_string_form_round_trips(services):
    user_id = ObjectId()
    token = services.token_store.create_token(user_id)

    assert services.gate.is_valid(ObjectId(str(token)), ObjectId(str(user_id)))

def test_create_score(client, make_game):
    game = make_game()
    res = client.post('/scores', json={
        'game_hex_id': game['hex_id'].upper(),
        'score': '1500',
        'user_name': 'Alice',
        'user_id': 'u1',
        'extra': {'level': 3},
    })
    assert res.status_code == 201
    score = res.get_json()
    assert score['game_hex_id'] == game['hex_id']
    assert score['score'] == '1500'
    assert score['score_val'] == 1500.0
    assert score['extra'] == {'level': 3}
    assert score['deleted_at'] is None


def test_create_score_explicit_and_unparseable_values(client, make_game, make_score):
    game = make_game()
    explicit = make_score(game['hex_id'], '1:02.5', score_val=62.5)
    assert explicit['score_val'] == 62.5
    text_only = make_score(game['hex_id'], 'gold medal')
    assert text_only['score_val'] == 0.0
    numeric = make_score(game['hex_id'], 42)
    assert numeric['score'] == '42'
    assert numeric['score_val'] == 42.0


def test_create_score_validation(client, make_game):
    game = make_game()
    res = client.post('/scores', json={'game_hex_id': game['hex_id'], 'score': '1'})
    assert res.status_code == 422
    assert 'user_name' in res.get_json()['error']

    res = client.post('/scores', json={
        'game_hex_id': game['hex_id'], 'score': '1', 'user_name': 'a', 'user_id': 'u', 'score_val': True,
    })
    assert res.status_code == 422

    res = client.post('/scores', json={
        'game_hex_id': 'zzzzzz', 'score': '1', 'user_name': 'a', 'user_id': 'u',
    })
    assert res.status_code == 404


def test_score_on_deleted_game_is_born_deleted(client, make_game, make_score):
    game = make_game()
    hex_id = game['hex_id']
    client.delete(f'/games/{hex_id}')
    score = make_score(hex_id, '5')
    assert score['deleted_at'] is not None

    restored = client.post(f'/games/{hex_id}/restore').get_json()
    assert restored['restored_scores'] == 1
    assert client.get(f"/scores/{score['id']}").status_code == 200


def test_update_score(client, make_game, make_score):
    game = make_game()
    score = make_score(game['hex_id'], '10')
    res = client.put(f"/scores/{score['id']}", json={'score': '25'})
    assert res.status_code == 200
    updated = res.get_json()
    assert updated['score'] == '25'
    assert updated['score_val'] == 25.0
    assert updated['user_name'] == 'alice'

    res = client.put(f"/scores/{score['id']}", json={'user_name': 'Zed', 'score_val': 99})
    assert res.get_json()['user_name'] == 'Zed'
    assert res.get_json()['score_val'] == 99.0


def test_delete_and_restore_score(client, make_game, make_score):
    game = make_game()
    score = make_score(game['hex_id'], '10')
    assert client.delete(f"/scores/{score['id']}").status_code == 204
    assert client.get(f"/scores/{score['id']}").status_code == 404
    assert client.delete(f"/scores/{score['id']}").status_code == 404

    res = client.post(f"/scores/{score['id']}/restore")
    assert res.status_code == 200
    assert res.get_json()['deleted_at'] is None


def test_restore_score_of_deleted_game_conflicts(client, make_game, make_score):
    game = make_game()
    score = make_score(game['hex_id'], '10')
    client.delete(f"/scores/{score['id']}")
    client.delete(f"/games/{game['hex_id']}")
    assert client.post(f"/scores/{score['id']}/restore").status_code == 409


def test_list_scores_default_sort(client, make_game, make_score):
    game = make_game()
    for value, name in [('10', 'a'), ('30', 'b'), ('20', 'c')]:
        make_score(game['hex_id'], value, user_name=name)
    page = client.get(f"/scores?game_hex_id={game['hex_id']}").get_json()
    assert [s['score'] for s in page['data']] == ['30', '20', '10']
    assert page['page_size'] == 25


def test_list_scores_user_name_sort_is_case_insensitive(client, make_game, make_score):
    game = make_game()
    for name in ['bob', 'Alice', 'carol']:
        make_score(game['hex_id'], '1', user_name=name)
    page = client.get(f"/scores?game_hex_id={game['hex_id']}&sort_by=user_name").get_json()
    assert [s['user_name'] for s in page['data']] == ['Alice', 'bob', 'carol']
    page = client.get(f"/scores?game_hex_id={game['hex_id']}&sort_by=user_name&order=desc").get_json()
    assert [s['user_name'] for s in page['data']] == ['carol', 'bob', 'Alice']


def test_list_scores_across_games_hides_deleted_games(client, make_game, make_score):
    kept = make_game('kept')
    gone = make_game('gone')
    make_score(kept['hex_id'], '1')
    make_score(gone['hex_id'], '2')
    client.delete(f"/games/{gone['hex_id']}")
    page = client.get('/scores').get_json()
    assert [s['game_hex_id'] for s in page['data']] == [kept['hex_id']]


def test_list_scores_bad_parameters(client, make_game):
    game = make_game()
    base = f"/scores?game_hex_id={game['hex_id']}"
    assert client.get(base + '&limit=0').status_code == 400
    assert client.get(base + '&limit=abc').status_code == 400
    assert client.get(base + '&sort_by=bogus').status_code == 400
    assert client.get(base + '&order=sideways').status_code == 400
    assert client.get(base + '&cursor=not-a-cursor').status_code == 400
    assert client.get(base + '&limit=500').get_json()['page_size'] == 100


def test_list_scores_unknown_game_is_empty(client):
    page = client.get('/scores?game_hex_id=zzzzzz').get_json()
    assert page['data'] == []
    assert page['has_more'] is False

def create(client, **overrides):
    item = {
        "referenceId": 101,
        "referenceType": "ORDER",
        "task": "CREATE_INVOICE",
        "assigneeId": 1,
        "priority": "MEDIUM",
        "taskDeadlineTime": 1_700_000_000_000,
    }
    item.update(overrides)
    r = client.post('/task-mgmt/create', json={"requests": [item]})
    assert r.status_code == 201, r.text
    return r.json()['data'][0]


def test_create_and_get_task(client):
    task = create(client)
    assert task['status'] == 'ASSIGNED'
    assert task['description'] == 'New task created.'
    assert task['referenceType'] == 'ORDER'
    assert task['task'] == 'CREATE_INVOICE'
    assert [a['description'] for a in task['activityHistory']] == ['Created']

    r = client.get(f"/task-mgmt/{task['id']}")
    assert r.status_code == 200
    assert r.json()['id'] == task['id']

def test_get_missing_task_returns_404(client):
    r = client.get('/task-mgmt/999')
    assert r.status_code == 404
    body = r.json()
    assert body['detail']['code'] == 'TASK_NOT_FOUND'
    assert '999' in body['detail']['message']

def test_create_rejects_unknown_task_kind(client):
    r = client.post('/task-mgmt/create', json={"requests": [{
        "referenceId": 1, "referenceType": "ORDER", "task": "FLY_TO_MOON",
        "assigneeId": 1, "priority": "HIGH", "taskDeadlineTime": 0,
    }]})
    assert r.status_code == 422

def test_update_reports_partial_failures(client):
    task = create(client)
    r = client.post('/task-mgmt/update', json={"requests": [
        {"taskId": task['id'], "taskStatus": "STARTED", "description": "on the way"},
        {"taskId": 4242, "taskStatus": "COMPLETED"},
    ]})
    assert r.status_code == 200, r.text
    body = r.json()
    assert len(body['data']) == 1
    updated = body['data'][0]
    assert updated['status'] == 'STARTED'
    assert updated['description'] == 'on the way'
    assert [a['description'] for a in updated['activityHistory']] == ['Created', 'Status changed to STARTED']
    assert body['failures'] == [{
        "index": 1, "taskId": 4242, "code": "TASK_NOT_FOUND", "message": "Task not found with id: 4242",
    }]

def test_assign_by_reference_flow(client):
    open_task = create(client, task="CREATE_INVOICE", assigneeId=1)
    done_task = create(client, task="ARRANGE_PICKUP", assigneeId=1)
    client.post('/task-mgmt/update', json={"requests": [{"taskId": done_task['id'], "taskStatus": "COMPLETED"}]})

    r = client.post('/task-mgmt/assign-by-ref', json={"referenceId": 101, "referenceType": "ORDER", "assigneeId": 2})
    assert r.status_code == 200
    assert r.json()['message'] == 'Tasks reassigned and old assignments cancelled for reference 101'

    assert client.get(f"/task-mgmt/{open_task['id']}").json()['status'] == 'CANCELLED'
    done = client.get(f"/task-mgmt/{done_task['id']}").json()
    assert done['status'] == 'COMPLETED'
    assert len(done['activityHistory']) == 2

    # reassigned tasks have no deadline, so look them up by id
    new_ids = range(done_task['id'] + 1, done_task['id'] + 4)
    new_tasks = [client.get(f"/task-mgmt/{i}").json() for i in new_ids]
    assert [t['task'] for t in new_tasks] == ['CREATE_INVOICE', 'ARRANGE_PICKUP', 'COLLECT_PAYMENT']
    assert all(t['assigneeId'] == 2 and t['status'] == 'ASSIGNED' for t in new_tasks)
    assert all(t['activityHistory'][0]['description'] == 'Assigned to user 2' for t in new_tasks)

def test_fetch_by_date_carries_forward_open_tasks(client):
    overdue = create(client, taskDeadlineTime=500)
    in_window = create(client, taskDeadlineTime=1_500)
    create(client, taskDeadlineTime=5_000)
    finished = create(client, taskDeadlineTime=400)
    cancelled = create(client, taskDeadlineTime=1_200)
    client.post('/task-mgmt/update', json={"requests": [
        {"taskId": finished['id'], "taskStatus": "COMPLETED"},
        {"taskId": cancelled['id'], "taskStatus": "CANCELLED"},
    ]})

    r = client.post('/task-mgmt/fetch-by-date/v2', json={"assigneeIds": [1], "startDate": 1_000, "endDate": 2_000})
    assert r.status_code == 200
    assert [t['id'] for t in r.json()['data']] == [overdue['id'], in_window['id']]

def test_fetch_by_date_inverted_window_returns_overdue_open_tasks(client):
    overdue = create(client, taskDeadlineTime=5)
    finished = create(client, taskDeadlineTime=8)
    client.post('/task-mgmt/update', json={"requests": [{"taskId": finished['id'], "taskStatus": "COMPLETED"}]})

    r = client.post('/task-mgmt/fetch-by-date/v2', json={"assigneeIds": [1], "startDate": 10, "endDate": 1})
    assert r.status_code == 200
    assert [t['id'] for t in r.json()['data']] == [overdue['id']]

def test_priority_update_and_listing(client):
    task = create(client, priority="LOW")
    r = client.put(f"/task-mgmt/{task['id']}/priority", json={"priority": "HIGH"})
    assert r.status_code == 200

    listed = client.get('/task-mgmt/priority/HIGH').json()['data']
    assert [t['id'] for t in listed] == [task['id']]
    assert listed[0]['activityHistory'][-1]['description'] == 'Priority changed to HIGH'
    assert client.get('/task-mgmt/priority/LOW').json()['data'] == []

def test_priority_update_missing_task(client):
    r = client.put('/task-mgmt/77/priority', json={"priority": "HIGH"})
    assert r.status_code == 404

def test_add_comment(client):
    task = create(client)
    r = client.post(f"/task-mgmt/{task['id']}/comments", json={"userId": 5, "comment": "called customer"})
    assert r.status_code == 201

    body = client.get(f"/task-mgmt/{task['id']}").json()
    assert [(c['userId'], c['comment']) for c in body['comments']] == [(5, 'called customer')]
    assert body['activityHistory'][-1]['description'] == 'Comment added by user 5'

def test_add_comment_missing_task(client):
    r = client.post('/task-mgmt/31/comments', json={"userId": 5, "comment": "x"})
    assert r.status_code == 404

from datetime import date, datetime, timedelta

from taskmanager.models.task import Task


# ========== TEST CREATE TASK ==========
def test_create_task_defaults(client):
    """Créer une tâche avec juste un titre: valeurs par défaut"""
    response = client.post("/api/tasks", json={"title": "Buy milk"})
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Task created successfully"

    data = body["data"]
    assert isinstance(data["id"], int)
    assert data["title"] == "Buy milk"
    assert data["status"] == "pending"
    assert data["priority"] == "medium"
    assert data["description"] is None
    assert data["due_date"] is None
    assert data["created_at"] == data["updated_at"]


def test_create_task_all_fields(client):
    """Créer une tâche complète"""
    due = (date.today() + timedelta(days=3)).isoformat()
    response = client.post(
        "/api/tasks",
        json={
            "title": "Write report",
            "description": "Quarterly numbers",
            "status": "in_progress",
            "priority": "high",
            "due_date": due
        }
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "in_progress"
    assert data["priority"] == "high"
    assert data["description"] == "Quarterly numbers"
    assert data["due_date"] == due


def test_create_task_trims_strings(client):
    """Le titre et la description sont trimés, description vide -> null"""
    response = client.post("/api/tasks", json={"title": "  Call Bob  ", "description": "   "})
    data = response.json()["data"]
    assert data["title"] == "Call Bob"
    assert data["description"] is None


def test_create_task_empty_due_date_is_null(client):
    response = client.post("/api/tasks", json={"title": "No date", "due_date": ""})
    assert response.status_code == 201
    assert response.json()["data"]["due_date"] is None


def test_create_task_past_due_date_accepted(client):
    """Seule l'UI interdit une date passée, l'API l'accepte"""
    past = (date.today() - timedelta(days=10)).isoformat()
    response = client.post("/api/tasks", json={"title": "Late", "due_date": past})
    assert response.status_code == 201
    assert response.json()["data"]["due_date"] == past


def test_create_task_whitespace_title_rejected(client, db):
    """Titre vide après trim: 400 et rien en base"""
    response = client.post("/api/tasks", json={"title": "  "})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Title is required"
    assert db.query(Task).count() == 0


def test_create_task_missing_title_rejected(client, db):
    response = client.post("/api/tasks", json={"description": "no title"})
    assert response.status_code == 400
    assert response.json()["error"] == "Title is required"
    assert db.query(Task).count() == 0


def test_create_task_title_too_long(client):
    response = client.post("/api/tasks", json={"title": "x" * 256})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "title: String should have at most 255 characters"


def test_create_task_title_255_chars_after_trim(client):
    """La limite s'applique au titre trimé"""
    response = client.post("/api/tasks", json={"title": "  " + "x" * 255 + "  "})
    assert response.status_code == 201
    assert len(response.json()["data"]["title"]) == 255


def test_create_task_invalid_status_rejected(client, db):
    """Status/priority hors énumération refusés"""
    response = client.post("/api/tasks", json={"title": "Bad", "status": "archived"})
    assert response.status_code == 400
    assert "status" in response.json()["error"]

    response = client.post("/api/tasks", json={"title": "Bad", "priority": "urgent"})
    assert response.status_code == 400
    assert db.query(Task).count() == 0


# ========== TEST GET TASK ==========
def test_get_task_round_trip(client, create_task):
    """create -> get retourne le même enregistrement"""
    created = create_task(title=" Round trip ", description=" desc ", priority="low")
    response = client.get(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == created
    assert body["data"]["title"] == "Round trip"
    assert body["data"]["description"] == "desc"


def test_get_task_not_found(client):
    response = client.get("/api/tasks/9999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Task not found"}


def test_get_task_non_integer_id(client):
    response = client.get("/api/tasks/abc")
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_task_id_out_of_range(client):
    """Id hors de la colonne INTEGER: 400, pas 500"""
    for method in ("get", "delete"):
        response = getattr(client, method)("/api/tasks/99999999999999999999")
        assert response.status_code == 400
        assert response.json()["success"] is False

    response = client.put("/api/tasks/2147483648", json={"status": "completed"})
    assert response.status_code == 400


# ========== TEST LIST TASKS ==========
def test_list_tasks_empty(client):
    response = client.get("/api/tasks")
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": [], "count": 0}


def test_list_tasks_newest_first(client, create_task):
    """Tri par created_at décroissant"""
    ids = [create_task(title=f"Tâche {i}")["id"] for i in range(3)]

    body = client.get("/api/tasks").json()
    assert body["count"] == 3
    assert [t["id"] for t in body["data"]] == list(reversed(ids))

    created = [datetime.fromisoformat(t["created_at"]) for t in body["data"]]
    assert created == sorted(created, reverse=True)


def test_filter_tasks_by_status_and_priority(client, create_task):
    """Filtre status=completed&priority=high: conjonction exacte"""
    create_task(title="A", status="completed", priority="high")
    create_task(title="B", status="completed", priority="low")
    create_task(title="C", status="pending", priority="high")
    create_task(title="D", status="completed", priority="high")

    body = client.get("/api/tasks?status=completed&priority=high").json()
    assert body["count"] == 2
    assert [t["title"] for t in body["data"]] == ["D", "A"]
    assert all(t["status"] == "completed" and t["priority"] == "high" for t in body["data"])


def test_filter_tasks_by_priority(client, create_task):
    create_task(title="Low", priority="low")
    create_task(title="High 1", priority="high")
    create_task(title="High 2", priority="high")

    body = client.get("/api/tasks?priority=high").json()
    assert body["count"] == 2
    assert all(t["priority"] == "high" for t in body["data"])


def test_filter_unknown_value_returns_empty(client, create_task):
    create_task(title="A")
    body = client.get("/api/tasks?status=archived").json()
    assert body == {"success": True, "data": [], "count": 0}


# ========== TEST UPDATE TASK ==========
def test_update_status_only(client, create_task):
    """Modifier seulement le status: les autres champs ne bougent pas"""
    due = (date.today() + timedelta(days=5)).isoformat()
    created = create_task(title="Keep me", description="same", priority="high", due_date=due)

    response = client.put(f"/api/tasks/{created['id']}", json={"status": "in_progress"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Task updated successfully"

    data = body["data"]
    assert data["status"] == "in_progress"
    for field in ("title", "description", "priority", "due_date", "created_at"):
        assert data[field] == created[field]
    assert datetime.fromisoformat(data["updated_at"]) >= datetime.fromisoformat(created["updated_at"])


def test_update_task_fields(client, create_task):
    created = create_task(title="Original", priority="low")
    response = client.put(
        f"/api/tasks/{created['id']}",
        json={"title": "  Modifiée  ", "priority": "high"}
    )
    data = response.json()["data"]
    assert data["title"] == "Modifiée"
    assert data["priority"] == "high"

    # Persisté
    assert client.get(f"/api/tasks/{created['id']}").json()["data"]["title"] == "Modifiée"


def test_update_null_title_is_ignored(client, create_task):
    created = create_task(title="Stays")
    response = client.put(f"/api/tasks/{created['id']}", json={"title": None, "status": None})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Stays"
    assert data["status"] == "pending"


def test_update_clears_description(client, create_task):
    created = create_task(title="With desc", description="to remove")
    response = client.put(f"/api/tasks/{created['id']}", json={"description": ""})
    assert response.json()["data"]["description"] is None


def test_update_blank_title_rejected(client, create_task):
    created = create_task(title="Valid")
    response = client.put(f"/api/tasks/{created['id']}", json={"title": "   "})
    assert response.status_code == 400
    assert response.json()["error"] == "Title is required"
    assert client.get(f"/api/tasks/{created['id']}").json()["data"]["title"] == "Valid"


def test_update_task_not_found(client):
    response = client.put("/api/tasks/424242", json={"status": "completed"})
    assert response.status_code == 404
    assert response.json()["error"] == "Task not found"


# ========== TEST DELETE TASK ==========
def test_delete_task_returns_record(client, create_task, db):
    created = create_task(title="À supprimer")

    response = client.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Task deleted successfully"
    assert body["data"] == created

    assert client.get(f"/api/tasks/{created['id']}").status_code == 404
    assert db.query(Task).count() == 0


def test_delete_task_not_found_keeps_rows(client, create_task, db):
    """Suppression d'un id inexistant: 404, nombre de lignes inchangé"""
    create_task(title="One")
    create_task(title="Two")

    response = client.delete("/api/tasks/9999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Task not found"}
    assert db.query(Task).count() == 2

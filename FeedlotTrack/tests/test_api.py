"""
Integration tests for the HTTP layer
"""


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestLotesEndpoints:
    def test_weight_curve(self, client, feedlot):
        response = client.get(f"/lotes/{feedlot.lote_id}/curva-peso", params={"dia_fim": 10})
        assert response.status_code == 200
        pontos = response.json()["pontos"]
        assert pontos[0] == {"dia": 1, "peso_kg": 350.0}
        assert pontos[-1] == {"dia": 10, "peso_kg": 363.5}

    def test_ration_projection(self, client, feedlot):
        response = client.get(f"/lotes/{feedlot.lote_id}/racao")
        assert response.status_code == 200
        data = response.json()
        assert len(data["dias"]) == 90
        assert sum(p["dias"] for p in data["periodos"]) == 90

    def test_replace_periods_with_gap(self, client, feedlot):
        response = client.put(f"/lotes/{feedlot.lote_id}/periodos", json={"periodos": [
            {"dieta_id": feedlot.adaptacao_id, "dia_inicial": 1, "dia_final": 20, "ingestao_ms_pct_pv": 2.0},
            {"dieta_id": feedlot.terminacao_id, "dia_inicial": 21, "dia_final": 89, "ingestao_ms_pct_pv": 2.2},
        ]})
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert "coverage mismatch" in body["detail"]

    def test_unknown_lot(self, client, feedlot):
        response = client.get("/lotes/999/racao")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestLeiturasEndpoints:
    def test_night_then_morning(self, client, feedlot):
        response = client.post(f"/leituras-cocho/{feedlot.lote_id}/noturna", json={
            "data": "2026-01-19",
            "leitura_noturna": "vazio",
        })
        assert response.status_code == 201
        assert response.json()["data_referencia"] == "2026-01-20"

        response = client.post(f"/leituras-cocho/{feedlot.lote_id}/diurna", json={
            "data": "2026-01-20",
            "fase_dieta": "adaptacao_crescimento",
            "comportamento_manha": "maioria_em_pe_muita_fome",
            "situacao_cocho_manha": "limpo_lambido",
            "kg_anterior_por_cabeca": 8.0,
        })
        assert response.status_code == 201
        data = response.json()
        assert data["nota_cocho"] == -2.0
        assert data["percentual_ajuste"] == 15.0
        assert data["kg_novo_por_cabeca"] == 9.2
        assert data["concluida"] is True
        assert data["alertas"]

        response = client.get(f"/leituras-cocho/{feedlot.lote_id}/2026-01-20")
        assert response.status_code == 200
        assert response.json()["leitura_noturna"] == "vazio"

    def test_completed_reading_conflict(self, client, feedlot):
        body = {
            "data": "2026-01-20",
            "fase_dieta": "terminacao",
            "comportamento_manha": "deitados_calmos",
            "situacao_cocho_manha": "pouca_sobra",
        }
        assert client.post(f"/leituras-cocho/{feedlot.lote_id}/diurna", json=body).status_code == 201
        response = client.post(f"/leituras-cocho/{feedlot.lote_id}/diurna", json=body)
        assert response.status_code == 409
        assert response.json()["error"] == "state_error"

    def test_invalid_enum(self, client, feedlot):
        response = client.post(f"/leituras-cocho/{feedlot.lote_id}/noturna", json={
            "data": "2026-01-19",
            "leitura_noturna": "meio",
        })
        assert response.status_code == 422


class TestPlanejamentosEndpoints:
    def test_draft_and_save(self, client, feedlot):
        url = f"/planejamentos/{feedlot.lote_id}/2026-01-10"
        response = client.post(f"{url}/rascunho", json={"tipo_leitura": "simples"})
        assert response.status_code == 200
        draft = response.json()
        assert draft["total_kg"] == 1454.0
        assert draft["numero_tratos"] == 3
        assert draft["soma_percentual"] == 100.0

        response = client.put(url, json={
            "tipo_leitura": "simples",
            "vagao_id": feedlot.vagao_id,
            "tratos": [{"horario": "06:00", "percentual": 60}, {"horario": "15:00", "percentual": 40}],
        })
        assert response.status_code == 200
        plano = response.json()
        assert plano["vagao_id"] == feedlot.vagao_id
        assert [t["quantidade_kg"] for t in plano["tratos"]] == [872.4, 581.6]

        assert client.get(url).json()["planejamento_id"] == plano["planejamento_id"]

    def test_save_rejects_bad_sum(self, client, feedlot):
        response = client.put(f"/planejamentos/{feedlot.lote_id}/2026-01-10", json={
            "tipo_leitura": "simples",
            "tratos": [{"horario": "06:00", "percentual": 60}, {"horario": "15:00", "percentual": 30}],
        })
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestBatidasEndpoints:
    def test_approval_flow(self, client, feedlot):
        response = client.post("/batidas", json={"dieta_id": feedlot.adaptacao_id, "quantidade_kg": 500})
        assert response.status_code == 201
        batida = response.json()
        assert batida["status"] == "PREPARANDO"

        response = client.post("/estoque/entradas", json={"insumo_id": feedlot.milho_id, "quantidade_kg": 300})
        assert response.status_code == 201

        response = client.post(f"/batidas/{batida['batida_id']}/aprovar")
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "insufficient_stock"
        assert body["faltas"][0]["faltante_kg"] == 200.0
        assert client.get(f"/batidas/{batida['batida_id']}").json()["status"] == "PREPARANDO"

        client.post("/estoque/entradas", json={"insumo_id": feedlot.milho_id, "quantidade_kg": 300})
        response = client.post(f"/batidas/{batida['batida_id']}/aprovar")
        assert response.status_code == 200
        assert response.json()["status"] == "CONCLUIDA"

        saldo = client.get(f"/estoque/{feedlot.milho_id}/saldo").json()
        assert saldo["saldo_kg"] == 100.0

        response = client.post(f"/batidas/{batida['batida_id']}/cancelar")
        assert response.status_code == 409
        assert response.json()["error"] == "state_error"

        assert client.delete(f"/batidas/{batida['batida_id']}").status_code == 409

    def test_delete_preparing_batch(self, client, feedlot):
        batida = client.post("/batidas", json={"dieta_id": feedlot.adaptacao_id, "quantidade_kg": 500}).json()
        assert client.delete(f"/batidas/{batida['batida_id']}").status_code == 204
        assert client.get(f"/batidas/{batida['batida_id']}").status_code == 404

"""
HTTP tests for the JSON routes: authentication, orders, equipment and parts.
"""
from fieldservice.utils.clock import utc_now

from fieldservice.buisness.inventory.part_manager import PartManager
from fieldservice.buisness.assets.equipment_manager import EquipmentManager
from fieldservice.data.inventory.consumption_record import ConsumptionRecord
from fieldservice.data.inventory.part import Part


def test_login_rejects_bad_password(client, admin_user):
    response = client.post('/login', json={'username': 'admin', 'password': 'wrong'})
    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_login_requires_both_fields(client):
    response = client.post('/login', data={'username': 'admin'})
    assert response.status_code == 400


def test_routes_require_login(client):
    for path in ('/', '/ordens', '/equipamentos', '/correias', '/correias/relatorio?mes=2024-05'):
        response = client.get(path)
        assert response.status_code == 401, path
        assert response.get_json()['error'] == 'Authentication required'


def test_dashboard_summary(admin_client):
    response = admin_client.get('/')
    assert response.status_code == 200
    data = response.get_json()
    assert data['user']['username'] == 'admin'
    assert 'password_hash' not in data['user']
    assert data['summary'] == {'open_orders': 0, 'closed_this_month': 0, 'parts': 0, 'parts_out_of_stock': 0}


def test_security_headers(client):
    response = client.get('/csrf-token')
    assert response.status_code == 200
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'SAMEORIGIN'
    assert 'csrf_token' in response.get_json()


def test_order_open_list_and_close(technician_client):
    response = technician_client.post('/ordens', json={
        'equipamento_id': 1,
        'solicitante': 'João',
        'tipo': 'corrective',
        'descricao': 'motor noise',
    })
    assert response.status_code == 201
    order = response.get_json()['order']
    assert order['status'] == 'open'
    assert order['closed_at'] is None
    assert order['equipment_name'] == 'unknown'

    response = technician_client.post(f"/ordens/{order['id']}/fechar", data={'resultado': 'replaced bearing'})
    assert response.status_code == 200
    closed = response.get_json()['order']
    assert closed['status'] == 'closed'
    assert closed['result'] == 'replaced bearing'
    assert closed['closed_at'] is not None

    response = technician_client.post(f"/ordens/{order['id']}/fechar", json={'resultado': 'again'})
    assert response.status_code == 409
    assert response.get_json()['error_type'] == 'AlreadyClosedError'

    detail = technician_client.get(f"/ordens/{order['id']}").get_json()['order']
    assert detail['result'] == 'replaced bearing'


def test_order_list_puts_open_orders_first(technician_client):
    ids = []
    for description in ('first', 'second', 'third'):
        response = technician_client.post('/ordens', json={'solicitante': 'Ana', 'descricao': description})
        ids.append(response.get_json()['order']['id'])
    technician_client.post(f'/ordens/{ids[2]}/fechar', json={'resultado': 'ok'})

    orders = technician_client.get('/ordens').get_json()['orders']
    assert [o['status'] for o in orders] == ['open', 'open', 'closed']
    assert orders[-1]['id'] == ids[2]

    closed = technician_client.get('/ordens?status=closed').get_json()['orders']
    assert [o['id'] for o in closed] == [ids[2]]

    response = technician_client.get('/ordens?status=pending')
    assert response.status_code == 400


def test_order_validation_and_not_found(technician_client):
    response = technician_client.post('/ordens', json={'solicitante': 'Ana'})
    assert response.status_code == 400
    assert response.get_json()['error_type'] == 'ValidationError'

    assert technician_client.get('/ordens/999').status_code == 404
    assert technician_client.post('/ordens/999/fechar', json={'resultado': 'x'}).status_code == 404


def test_qr_intake_prefill_and_open(technician_client):
    equipment = EquipmentManager().create({'name': 'Bomba', 'location': 'Curral'})

    prefill = technician_client.get(f'/funcionario/abrir_os?equip_id={equipment.id}').get_json()
    assert prefill['equipment_name'] == 'Bomba'
    assert prefill['equipment_location'] == 'Curral'
    assert prefill['solicitante'] == 'tecnico'

    response = technician_client.post('/funcionario/abrir_os', data={
        'equip_id': str(equipment.id),
        'tipo': 'corrective',
        'descricao': 'vazamento',
    })
    assert response.status_code == 201
    order = response.get_json()['order']
    assert order['requester'] == 'tecnico'
    assert order['equipment_id'] == equipment.id


def test_debit_route(technician_client, db):
    equipment = EquipmentManager().create({'name': 'Misturador'})
    part = PartManager().create({'name': 'Belt A', 'quantity_on_hand': 10})
    equipment_id, part_id = equipment.id, part.id

    response = technician_client.post(
        f'/equipamentos/{equipment_id}/baixar-correia',
        json={'correia_id': part_id, 'quantidade': 4},
    )
    assert response.status_code == 201
    data = response.get_json()
    assert data['quantity_on_hand'] == 6
    assert data['consumption']['quantity'] == 4

    response = technician_client.post(
        f'/equipamentos/{equipment_id}/baixar-correia',
        data={'correia_id': str(part_id), 'quantidade': '10'},
    )
    assert response.status_code == 409
    error = response.get_json()
    assert error['error_type'] == 'InsufficientStockError'
    assert error['requested'] == 10
    assert error['available'] == 6

    assert db.session.get(Part, part_id).quantity_on_hand == 6
    assert db.session.query(ConsumptionRecord).count() == 1

    history = technician_client.get(f'/equipamentos/{equipment_id}/consumo').get_json()['history']
    assert [(h['part_name'], h['quantity']) for h in history] == [('Belt A', 4)]


def test_debit_route_errors(technician_client):
    equipment = EquipmentManager().create({'name': 'Misturador'})
    part = PartManager().create({'name': 'Belt A', 'quantity_on_hand': 10})

    response = technician_client.post(
        f'/equipamentos/{equipment.id}/baixar-correia', json={'correia_id': part.id, 'quantidade': 0}
    )
    assert response.status_code == 400
    assert response.get_json()['error_type'] == 'InvalidQuantityError'

    response = technician_client.post(
        '/equipamentos/999/baixar-correia', json={'correia_id': part.id, 'quantidade': 1}
    )
    assert response.status_code == 404


def test_admin_only_routes_forbid_technicians(technician_client):
    assert technician_client.post('/correias', json={'nome': 'Belt X'}).status_code == 403
    assert technician_client.post('/equipamentos', json={'nome': 'Prensa'}).status_code == 403
    assert technician_client.post('/correias/1/reabastecer', json={'delta': 5}).status_code == 403


def test_admin_manages_parts_links_and_report(admin_client):
    response = admin_client.post('/correias', json={'nome': 'Belt A', 'modelo': 'A', 'quantidade': 2})
    assert response.status_code == 201
    part = response.get_json()['part']
    assert part['quantity_on_hand'] == 2

    response = admin_client.post(f"/correias/{part['id']}/reabastecer", data={'quantidade': '', 'delta': '8'})
    assert response.status_code == 200
    assert response.get_json()['part']['quantity_on_hand'] == 10

    response = admin_client.post('/equipamentos', json={'nome': 'Triturador', 'codigo': 'TR-02'})
    assert response.status_code == 201
    equipment = response.get_json()['equipment']
    assert equipment['code'] == 'TR-02'

    response = admin_client.put(f"/equipamentos/{equipment['id']}/correias", json={
        'correias': [{'correia_id': part['id'], 'quantidade_usada': 2}],
    })
    assert response.status_code == 200
    assert response.get_json()['links'] == [
        {'part_id': part['id'], 'part_name': 'Belt A', 'default_quantity': 2},
    ]

    detail = admin_client.get(f"/equipamentos/{equipment['id']}").get_json()['equipment']
    assert detail['part_links'][0]['part_id'] == part['id']

    admin_client.post(
        f"/equipamentos/{equipment['id']}/baixar-correia", json={'correia_id': part['id'], 'quantidade': 3}
    )
    month = utc_now().strftime('%Y-%m')
    report = admin_client.get(f'/correias/relatorio?mes={month}').get_json()
    assert report['rows'][0]['equipment_name'] == 'Triturador'
    assert report['total_quantity'] == 3

    assert admin_client.get('/correias/relatorio?mes=2024-13').status_code == 400

    assert admin_client.delete(f"/equipamentos/{equipment['id']}").status_code == 200
    assert admin_client.get(f"/equipamentos/{equipment['id']}").status_code == 404


def test_order_photo_references(technician_client):
    response = technician_client.post('/ordens', data={
        'solicitante': 'João',
        'descricao': 'motor noise',
        'foto_antes': 'uploads/ordens/antes.jpg',
    })
    assert response.status_code == 201
    order = response.get_json()['order']
    assert order['photo_before'] == 'uploads/ordens/antes.jpg'
    assert order['photo_after'] is None

    response = technician_client.post(f"/ordens/{order['id']}/fechar", json={
        'resultado': 'replaced bearing',
        'foto_depois': 'uploads/ordens/depois.jpg',
    })
    closed = response.get_json()['order']
    assert closed['photo_before'] == 'uploads/ordens/antes.jpg'
    assert closed['photo_after'] == 'uploads/ordens/depois.jpg'

    response = technician_client.post('/funcionario/abrir_os', json={
        'equip_id': 5,
        'descricao': 'vazamento',
        'foto_antes': 'uploads/ordens/bomba.jpg',
    })
    assert response.get_json()['order']['photo_before'] == 'uploads/ordens/bomba.jpg'


def test_part_links_form_post(admin_client):
    equipment = EquipmentManager().create({'name': 'Triturador'})
    belt_a = PartManager().create({'name': 'Belt A', 'quantity_on_hand': 5})
    belt_b = PartManager().create({'name': 'Belt B', 'quantity_on_hand': 5})
    equipment_id, belt_a_id, belt_b_id = equipment.id, belt_a.id, belt_b.id

    response = admin_client.post(f'/equipamentos/{equipment_id}/correias', data={
        'correia_id': [str(belt_b_id), str(belt_a_id)],
        'quantidade_usada': ['3', '1'],
    })
    assert response.status_code == 200
    assert response.get_json()['links'] == [
        {'part_id': belt_a_id, 'part_name': 'Belt A', 'default_quantity': 1},
        {'part_id': belt_b_id, 'part_name': 'Belt B', 'default_quantity': 3},
    ]

    # No selected parts clears the links
    response = admin_client.post(f'/equipamentos/{equipment_id}/correias', data={})
    assert response.get_json()['links'] == []


def test_consumption_history_limit(technician_client):
    equipment = EquipmentManager().create({'name': 'Misturador'})
    part = PartManager().create({'name': 'Belt A', 'quantity_on_hand': 10})
    equipment_id, part_id = equipment.id, part.id
    for quantity in (1, 2, 3):
        technician_client.post(
            f'/equipamentos/{equipment_id}/baixar-correia', json={'correia_id': part_id, 'quantidade': quantity}
        )

    history = technician_client.get(f'/equipamentos/{equipment_id}/consumo?limite=2').get_json()['history']
    assert [h['quantity'] for h in history] == [3, 2]

    assert len(technician_client.get(f'/equipamentos/{equipment_id}/consumo').get_json()['history']) == 3
    assert technician_client.get(f'/equipamentos/{equipment_id}/consumo?limite=0').status_code == 400
    assert technician_client.get(f'/equipamentos/{equipment_id}/consumo?limite=abc').status_code == 400

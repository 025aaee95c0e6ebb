"""
CrmService tests over in-memory stores.

Run with: pytest tests/unit/test_crm_service.py -v
"""

from unittest.mock import MagicMock

import pytest

from models.customer import Customer, CustomerPayload
from models.interaction import Interaction
from models.purchase import Purchase
from repositories.entity_store import in_memory_stores
from services.crm_service import CrmService
from utils.validators import is_valid_id

MISSING_ID = "123e4567-e89b-42d3-a456-426614174000"


def _add_customer(service, payload) -> Customer:
    result = service.add_customer(payload)
    assert result.is_ok, result.to_dict()
    return result.value


class TestCustomers:

    def test_add_customer_assigns_id_and_empty_histories(self, service, customer_payload):
        customer = _add_customer(service, customer_payload)
        assert is_valid_id(customer.id)
        assert customer.interactions == []
        assert customer.purchases == []
        assert customer.name == "Acme"

    def test_add_customer_accepts_model_payload(self, service, customer_payload):
        customer = _add_customer(service, CustomerPayload(**customer_payload))
        assert customer.email == "a@acme.com"

    @pytest.mark.parametrize("payload", [None, {}, "Acme"])
    def test_add_customer_rejects_empty_payload(self, service, payload):
        result = service.add_customer(payload)
        assert result.to_dict() == {"Err": {"InvalidPayload": "Invalid payload"}}

    def test_add_customer_rejects_incomplete_payload(self, service):
        result = service.add_customer({"name": "Acme"})
        assert result.error_kind == "InvalidPayload"
        assert "CustomerPayload" in result.error.message

    def test_add_get_delete_lifecycle(self, service, customer_payload):
        customer = _add_customer(service, customer_payload)

        assert service.get_customer(customer.id).value == customer
        assert service.delete_customer(customer.id).to_dict() == {"Ok": customer.id}

        result = service.get_customer(customer.id)
        assert result.to_dict() == {
            "Err": {"NotFound": f"Customer with id={customer.id} not found"}
        }

    def test_delete_twice_is_not_found(self, service, customer_payload):
        customer = _add_customer(service, customer_payload)
        assert service.delete_customer(customer.id).is_ok
        assert service.delete_customer(customer.id).error_kind == "NotFound"

    def test_get_customer_rejects_malformed_id(self, service):
        result = service.get_customer("not-an-id")
        assert result.to_dict() == {"Err": {"InvalidPayload": "Invalid UUID"}}

    def test_delete_customer_rejects_malformed_id(self, service):
        assert service.delete_customer("bogus").error_kind == "InvalidPayload"

    def test_get_missing_customer(self, service):
        assert service.get_customer(MISSING_ID).error_kind == "NotFound"

    def test_list_customers(self, service, customer_payload):
        assert service.list_customers().value == []
        first = _add_customer(service, customer_payload)
        second = _add_customer(service, {**customer_payload, "name": "Globex"})
        listed = service.list_customers().value
        assert sorted(c.id for c in listed) == sorted([first.id, second.id])

    def test_update_customer_replaces_verbatim(self, service, customer_payload):
        customer = _add_customer(service, customer_payload)
        updated = customer.model_copy(update={"phone": "555-0199", "company": "Acme Ltd"})

        result = service.update_customer(updated)
        assert result.value == updated
        assert service.get_customer(customer.id).value == updated

    def test_update_customer_accepts_mapping(self, service, customer_payload):
        customer = _add_customer(service, customer_payload)
        record = {**customer.model_dump(), "name": "Acme Renamed"}
        assert service.update_customer(record).is_ok
        assert service.get_customer(customer.id).value.name == "Acme Renamed"

    def test_update_missing_customer(self, service, customer_payload):
        record = {**customer_payload, "id": MISSING_ID, "interactions": [], "purchases": []}
        result = service.update_customer(record)
        assert result.to_dict() == {
            "Err": {"NotFound": f"Customer with id={MISSING_ID} not found"}
        }


class TestInteractions:

    def test_add_interaction_embeds_and_stores(
        self, service, customer_payload, interaction_payload
    ):
        customer = _add_customer(service, customer_payload)

        result = service.add_interaction(customer.id, interaction_payload)
        assert result.is_ok
        interaction_id = result.value
        assert is_valid_id(interaction_id)
        assert interaction_id != customer.id

        embedded = service.list_customer_interactions(customer.id).value
        assert len(embedded) == 1
        assert embedded[0] == Interaction(id=interaction_id, **interaction_payload)

        standalone = service.get_interaction(interaction_id).value
        assert standalone == embedded[0]

    def test_add_interaction_validation_order(self, service, interaction_payload):
        bad_id = service.add_interaction("bogus", {})
        assert bad_id.to_dict() == {"Err": {"InvalidPayload": "Invalid customer UUID"}}

        bad_payload = service.add_interaction(MISSING_ID, {})
        assert bad_payload.to_dict() == {"Err": {"InvalidPayload": "Invalid payload"}}

        missing = service.add_interaction(MISSING_ID, interaction_payload)
        assert missing.to_dict() == {
            "Err": {"NotFound": f"Customer with id={MISSING_ID} not found"}
        }
        assert service.filter_by_status("Open").value == []

    def test_update_interaction_does_not_touch_embedded_copy(
        self, service, customer_payload, interaction_payload
    ):
        customer = _add_customer(service, customer_payload)
        interaction_id = service.add_interaction(customer.id, interaction_payload).value

        changed = Interaction(id=interaction_id, **{**interaction_payload, "status": "Closed"})
        assert service.update_interaction(changed).value == changed

        assert service.get_interaction(interaction_id).value.status == "Closed"
        embedded = service.list_customer_interactions(customer.id).value
        assert embedded[0].status == "Open"

    def test_delete_interaction_does_not_cascade(
        self, service, customer_payload, interaction_payload
    ):
        customer = _add_customer(service, customer_payload)
        interaction_id = service.add_interaction(customer.id, interaction_payload).value

        assert service.delete_interaction(interaction_id).to_dict() == {"Ok": interaction_id}
        assert service.get_interaction(interaction_id).error_kind == "NotFound"
        assert service.delete_interaction(interaction_id).error_kind == "NotFound"
        assert len(service.list_customer_interactions(customer.id).value) == 1

    def test_update_missing_interaction_skips_id_format_check(self, service, interaction_payload):
        result = service.update_interaction({**interaction_payload, "id": "not-a-uuid"})
        assert result.to_dict() == {
            "Err": {"NotFound": "Interaction with id=not-a-uuid not found"}
        }

    def test_get_and_delete_interaction_reject_malformed_id(self, service):
        assert service.get_interaction("x").error_kind == "InvalidPayload"
        assert service.delete_interaction("x").error_kind == "InvalidPayload"

    @pytest.mark.parametrize("customer_id", ["bogus", MISSING_ID, "", None])
    def test_list_customer_interactions_swallows_errors(self, service, customer_id):
        result = service.list_customer_interactions(customer_id)
        assert result.to_dict() == {"Ok": []}

    def test_filter_by_status_ignores_case(
        self, service, customer_payload, interaction_payload
    ):
        customer = _add_customer(service, customer_payload)
        closed_id = service.add_interaction(
            customer.id, {**interaction_payload, "status": "CLOSED"}
        ).value
        service.add_interaction(customer.id, interaction_payload)

        upper = service.filter_by_status("Closed").value
        lower = service.filter_by_status("closed").value
        assert upper == lower
        assert [i.id for i in upper] == [closed_id]

    def test_filter_by_status_reads_standalone_store(
        self, service, customer_payload, interaction_payload
    ):
        customer = _add_customer(service, customer_payload)
        interaction_id = service.add_interaction(customer.id, interaction_payload).value
        service.update_interaction(
            Interaction(id=interaction_id, **{**interaction_payload, "status": "Won"})
        )
        assert [i.id for i in service.filter_by_status("won").value] == [interaction_id]
        assert service.filter_by_status("open").value == []
        assert service.filter_by_status("").value == []


class TestPurchases:

    def test_add_purchase_embeds_and_stores(self, service, customer_payload, purchase_payload):
        customer = _add_customer(service, customer_payload)
        purchase_id = service.add_purchase(customer.id, purchase_payload).value

        embedded = service.list_customer_purchases(customer.id).value
        assert embedded == [Purchase(id=purchase_id, **purchase_payload)]
        assert service.get_purchase(purchase_id).value == embedded[0]

    def test_add_purchase_rejects_negative_quantity(
        self, service, customer_payload, purchase_payload
    ):
        customer = _add_customer(service, customer_payload)
        result = service.add_purchase(customer.id, {**purchase_payload, "quantity": -1})
        assert result.error_kind == "InvalidPayload"
        assert service.list_customer_purchases(customer.id).value == []

    def test_add_purchase_errors_mirror_interactions(self, service, purchase_payload):
        assert service.add_purchase("bogus", purchase_payload).to_dict() == {
            "Err": {"InvalidPayload": "Invalid customer UUID"}
        }
        assert service.add_purchase(MISSING_ID, None).to_dict() == {
            "Err": {"InvalidPayload": "Invalid payload"}
        }
        assert service.add_purchase(MISSING_ID, purchase_payload).error_kind == "NotFound"

    def test_update_purchase_diverges_from_embedded_copy(
        self, service, customer_payload, purchase_payload
    ):
        customer = _add_customer(service, customer_payload)
        purchase_id = service.add_purchase(customer.id, purchase_payload).value

        changed = Purchase(id=purchase_id, **{**purchase_payload, "quantity": 7})
        assert service.update_purchase(changed).is_ok
        assert service.get_purchase(purchase_id).value.quantity == 7
        assert service.list_customer_purchases(customer.id).value[0].quantity == 3

    def test_update_missing_purchase(self, service, purchase_payload):
        result = service.update_purchase({**purchase_payload, "id": MISSING_ID})
        assert result.to_dict() == {
            "Err": {"NotFound": f"Purchase with id={MISSING_ID} not found"}
        }

    def test_delete_purchase(self, service, customer_payload, purchase_payload):
        customer = _add_customer(service, customer_payload)
        purchase_id = service.add_purchase(customer.id, purchase_payload).value

        assert service.delete_purchase(purchase_id).value == purchase_id
        assert service.get_purchase(purchase_id).error_kind == "NotFound"
        assert service.delete_purchase("bad").error_kind == "InvalidPayload"

    @pytest.mark.parametrize("customer_id", ["bogus", MISSING_ID])
    def test_list_customer_purchases_swallows_errors(self, service, customer_id):
        assert service.list_customer_purchases(customer_id).value == []

    def test_get_purchases_by_date_is_string_match(
        self, service, customer_payload, purchase_payload
    ):
        customer = _add_customer(service, customer_payload)
        march = service.add_purchase(
            customer.id, {**purchase_payload, "date": "2024-Mar-02"}
        ).value
        service.add_purchase(customer.id, {**purchase_payload, "date": "2024-03-02"})

        assert [p.id for p in service.get_purchases_by_date("2024-mar-02").value] == [march]
        assert len(service.get_purchases_by_date("2024-03-02").value) == 1
        assert service.get_purchases_by_date("2024-03-2").value == []


class TestCompoundWrites:

    def test_customer_written_before_standalone_store(
        self, customer_payload, interaction_payload
    ):
        stores = in_memory_stores()
        service = CrmService(stores=stores)
        customer = _add_customer(service, customer_payload)

        stores.interactions = MagicMock(wraps=stores.interactions)
        stores.interactions.insert.side_effect = RuntimeError("store unavailable")

        with pytest.raises(RuntimeError):
            service.add_interaction(customer.id, interaction_payload)

        # The customer write already landed; nothing rolls it back.
        assert len(service.list_customer_interactions(customer.id).value) == 1

    def test_ids_come_from_factory(self, customer_payload):
        ids = iter(["11111111-1111-4111-8111-111111111111"])
        service = CrmService(stores=in_memory_stores(), id_factory=lambda: next(ids))
        customer = _add_customer(service, customer_payload)
        assert customer.id == "11111111-1111-4111-8111-111111111111"


class TestDynamoDbBackedUpdates:
    """Updates skip the id format check, so odd ids must still be NotFound."""

    def _service(self):
        from repositories.dynamodb_repo import DynamoDbStore
        from repositories.entity_store import EntityStore, Stores

        tables = {name: MagicMock() for name in ("customers", "interactions", "purchases")}
        for table in tables.values():
            table.get_item.return_value = {}
        stores = Stores(
            customers=EntityStore(Customer, DynamoDbStore("c", table=tables["customers"])),
            interactions=EntityStore(Interaction, DynamoDbStore("i", table=tables["interactions"])),
            purchases=EntityStore(Purchase, DynamoDbStore("p", table=tables["purchases"])),
        )
        return CrmService(stores=stores), tables

    def test_update_interaction_with_empty_id(self, interaction_payload):
        service, tables = self._service()
        result = service.update_interaction({**interaction_payload, "id": ""})
        assert result.to_dict() == {"Err": {"NotFound": "Interaction with id= not found"}}
        tables["interactions"].get_item.assert_not_called()
        tables["interactions"].put_item.assert_not_called()

    def test_update_purchase_with_oversized_id(self, purchase_payload):
        service, tables = self._service()
        result = service.update_purchase({**purchase_payload, "id": "p" * 3000})
        assert result.error_kind == "NotFound"
        tables["purchases"].get_item.assert_not_called()

    def test_update_customer_with_empty_id(self, customer_payload):
        service, _ = self._service()
        result = service.update_customer({**customer_payload, "id": ""})
        assert result.error_kind == "NotFound"

    def test_update_interaction_with_missing_well_formed_id(self, interaction_payload):
        service, tables = self._service()
        result = service.update_interaction({**interaction_payload, "id": MISSING_ID})
        assert result.error_kind == "NotFound"
        tables["interactions"].get_item.assert_called_once()

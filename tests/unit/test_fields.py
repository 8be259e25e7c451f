import pytest

from resourcekit import (
    RelationshipOptions,
    SerializerOptions,
    attribute_field_names,
    is_attribute,
    is_relationship,
    relationship_field_names,
    serializer_options,
)
from resourcekit.fields import relationship_for
from tests.unit.models import Address, Comment, DriversLicense, Person


@pytest.mark.unit
class TestFieldClassification:

    def test_attribute_field_names(self):
        assert attribute_field_names(Person) == ["first_name", "last_name"]
        assert attribute_field_names(Address) == ["type", "street", "zip"]

    def test_relationship_field_names(self):
        assert relationship_field_names(Person) == ["addresses", "drivers_license"]
        assert relationship_field_names(Address) == []

    @pytest.mark.parametrize("model_cls", [Person, Address, DriversLicense, Comment])
    def test_attributes_and_relationships_partition_fields(self, model_cls):
        attributes = set(attribute_field_names(model_cls))
        relationships = set(relationship_field_names(model_cls))

        assert attributes.isdisjoint(relationships)
        assert attributes | relationships | {"id"} == set(model_cls.model_fields)

    def test_instance_checks(self):
        person = Person(first_name="John")

        assert is_attribute(person, "first_name")
        assert not is_relationship(person, "first_name")
        assert is_relationship(person, "addresses")
        assert not is_attribute(person, "addresses")

    def test_id_is_neither(self):
        person = Person()

        assert not is_attribute(person, "id")
        assert not is_relationship(person, "id")

    def test_unknown_and_state_names_are_neither(self):
        person = Person()

        for name in ("nope", "errors", "persisted", "links", "meta"):
            assert not is_attribute(person, name)
            assert not is_relationship(person, name)

    def test_relationship_markers(self):
        addresses = relationship_for(Person, "addresses")
        license_ = relationship_for(Person, "drivers_license")
        author = relationship_for(Comment, "author")

        assert addresses.model is Address and addresses.many
        assert license_.model is DriversLicense and not license_.many
        assert author.kind == "belongs_to" and author.model is Person

    def test_lazy_relationship_target(self):
        assert relationship_for(Comment, "parent").model is Comment


@pytest.mark.unit
class TestSerializerOptions:

    def test_options_for_model_with_relationships(self):
        options = serializer_options(Person())

        assert options == SerializerOptions(
            attributes=["first_name", "last_name", "addresses", "drivers_license"],
            relationships={
                "addresses": RelationshipOptions(
                    ref="id", attributes=["type", "street", "zip"]
                ),
                "drivers_license": RelationshipOptions(
                    ref="id", attributes=["license_number"]
                ),
            },
        )

    def test_nested_relationships_are_not_expanded(self):
        options = serializer_options(Comment)

        assert options.relationships["author"].attributes == ["first_name", "last_name"]

    def test_options_for_plain_model(self):
        options = serializer_options(Address)

        assert options.attributes == ["type", "street", "zip"]
        assert options.relationships == {}

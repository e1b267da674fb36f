"""End-to-end query tests against SQLite."""

import pytest
from sqlalchemy.exc import IntegrityError

from entityquery import (
    ConfigurationError,
    ErrorCode,
    FieldMask,
    NoResultFound,
    Order,
    Query,
    column,
)

from tests.models import (
    DEFAULT_VALUE,
    ID,
    AnotherModel,
    ModelWithUniqueFields,
    OtherModel,
    SomeModel,
    another_model,
    model_with_unique_fields,
    other_model,
    some_different_model,
    some_model,
)


def fetch_by_id(connection, entity, id_):
    rows = (
        Query()
        .with_connection(connection)
        .from_(entity)
        .select(FieldMask.exclude())
        .where(column("id") == id_)
        .fetch()
    )
    assert len(rows) == 1
    return rows[0]


def insert_entity(connection, entity, mask):
    return Query().with_connection(connection).from_(entity).select(mask).insert()


class TestInsert:

    @pytest.mark.parametrize(
        "mask,entity,expected",
        [
            pytest.param(FieldMask.exclude(), some_model(), some_model(), id="required fields"),
            pytest.param(FieldMask.exclude(), other_model(), other_model(), id="nullable fields"),
            pytest.param(
                FieldMask.exclude(), OtherModel(id=2 * ID), OtherModel(id=2 * ID), id="null fields"
            ),
            pytest.param(
                FieldMask.exclude("default_value"),
                AnotherModel(id=3 * ID),
                AnotherModel(id=3 * ID, default_value=DEFAULT_VALUE),
                id="default value",
            ),
            pytest.param(
                FieldMask.exclude(),
                model_with_unique_fields(),
                model_with_unique_fields(),
                id="unique fields",
            ),
        ],
    )
    def test_insert_then_fetch(self, connection, mask, entity, expected):
        id_ = insert_entity(connection, entity, mask)

        assert id_ == entity.id
        assert fetch_by_id(connection, type(entity)(), id_) == expected

    def test_autogenerated_id(self, connection):
        data = some_model()
        data.id = None

        id_ = insert_entity(connection, data, FieldMask.exclude("id"))

        expected = some_model()
        expected.id = id_
        assert isinstance(id_, int)
        assert fetch_by_id(connection, SomeModel(), id_) == expected

    def test_excluded_required_column_is_rejected(self, connection):
        with pytest.raises(ConfigurationError) as exc_info:
            insert_entity(connection, some_model(), FieldMask.exclude("name"))

        assert exc_info.value.error_code == ErrorCode.MISSING_VALUE

    def test_unique_violation_surfaces_unchanged(self, connection):
        insert_entity(connection, model_with_unique_fields(), FieldMask.exclude())
        duplicate = model_with_unique_fields()
        duplicate.id = 2 * ID

        with pytest.raises(IntegrityError):
            insert_entity(connection, duplicate, FieldMask.exclude())


class TestCount:

    @pytest.fixture(autouse=True)
    def _rows(self, insert):
        insert(some_model(), some_different_model())

    def test_counts_all_rows(self, connection):
        assert Query().with_connection(connection).from_(SomeModel()).count() == 2

    def test_counts_filtered_rows(self, connection):
        query = Query().with_connection(connection).from_(SomeModel()).where(column("id") == ID)
        assert query.count() == 1

    def test_counts_empty_table(self, connection):
        assert Query().with_connection(connection).from_(OtherModel()).count() == 0

    def test_ignores_mask_and_pagination(self, connection):
        query = (
            Query()
            .with_connection(connection)
            .from_(SomeModel())
            .select(FieldMask.include("id"))
            .order_by("id")
            .limit(1)
            .offset(1)
        )
        assert query.count() == 2


class TestUpdate:

    def test_update(self, connection):
        id_ = insert_entity(connection, some_model(), FieldMask.exclude())
        update_data = some_different_model()

        affected = (
            Query()
            .with_connection(connection)
            .from_(update_data)
            .select(FieldMask.exclude("id"))
            .where(column("id") == id_)
            .update()
        )

        expected = some_different_model()
        expected.id = id_
        assert affected == 1
        assert fetch_by_id(connection, SomeModel(), id_) == expected

    def test_update_only_selected_fields(self, connection):
        id_ = insert_entity(connection, some_model(), FieldMask.exclude())
        update_data = some_different_model()

        (
            Query()
            .with_connection(connection)
            .from_(update_data)
            .select(FieldMask.include("name", "value"))
            .where(column("id") == id_)
            .update()
        )

        expected = some_model()
        expected.value = update_data.value
        expected.name = update_data.name
        assert fetch_by_id(connection, SomeModel(), id_) == expected

    def test_update_without_match_affects_nothing(self, connection):
        affected = (
            Query()
            .with_connection(connection)
            .from_(some_model())
            .select(FieldMask.include("name"))
            .where(column("id") == 12345)
            .update()
        )
        assert affected == 0


class TestDelete:

    def test_delete_then_fetch_finds_nothing(self, connection):
        id_ = insert_entity(connection, some_model(), FieldMask.exclude())

        affected = (
            Query()
            .with_connection(connection)
            .from_(SomeModel())
            .where(column("id") == id_)
            .delete()
        )

        assert affected == 1
        with pytest.raises(NoResultFound):
            (
                Query()
                .with_connection(connection)
                .from_(SomeModel())
                .select(FieldMask.include("id"))
                .where(column("id") == id_)
                .fetch()
            )

    def test_delete_without_match_is_not_an_error(self, connection):
        affected = (
            Query()
            .with_connection(connection)
            .from_(SomeModel())
            .where(column("id") == 1)
            .delete()
        )
        assert affected == 0


def _fetch_cases():
    return [
        pytest.param(
            lambda: Query()
            .from_(SomeModel())
            .select(FieldMask.include("id"))
            .where(column("id") == ID),
            [SomeModel(id=ID)],
            id="only selected fields",
        ),
        pytest.param(
            lambda: Query()
            .from_(SomeModel())
            .select(FieldMask.exclude())
            .where(column("some.id") == ID)
            .join(Query().from_(OtherModel()).select(FieldMask.exclude())),
            [some_model(), other_model()],
            id="inner join",
        ),
        pytest.param(
            lambda: Query()
            .from_(SomeModel())
            .select(FieldMask.exclude())
            .where(column("some.id") == 2 * ID)
            .join(Query().from_(OtherModel()).select(FieldMask.exclude()).nullable()),
            [some_different_model(), OtherModel()],
            id="left join",
        ),
        pytest.param(
            lambda: Query()
            .from_(SomeModel())
            .select(FieldMask.exclude())
            .where(column("some.id") == ID)
            .join(
                Query()
                .from_(OtherModel())
                .select(FieldMask.exclude())
                .where(column("other.id") == ID - 1)
                .nullable()
            ),
            [some_model(), OtherModel()],
            id="filter as join condition",
        ),
        pytest.param(
            lambda: Query()
            .from_(SomeModel())
            .select(FieldMask.exclude())
            .where(column("some.id") == ID)
            .join(
                Query()
                .from_(OtherModel())
                .select(FieldMask.exclude())
                .join(Query().from_(AnotherModel()).select(FieldMask.exclude()))
            ),
            [some_model(), other_model(), another_model()],
            id="nested joins",
        ),
        pytest.param(
            lambda: Query()
            .from_(SomeModel())
            .select(FieldMask.exclude())
            .where(column("some.id") == ID)
            .join(
                Query()
                .from_(OtherModel())
                .select(FieldMask.exclude())
                .join(
                    Query()
                    .from_(AnotherModel())
                    .select(FieldMask.exclude())
                    .where(column("another.id") == ID - 1)
                )
                .nullable()
            ),
            [some_model(), OtherModel(), AnotherModel()],
            id="nested joins first",
        ),
        pytest.param(
            lambda: Query()
            .from_(SomeModel())
            .select(FieldMask.exclude())
            .where(column("some.id") == ID)
            .join(
                Query()
                .from_(OtherModel())
                .select(FieldMask.exclude())
                .join(
                    Query()
                    .from_(AnotherModel())
                    .select(FieldMask.exclude())
                    .where(column("another.id") == ID - 1)
                    .nullable()
                )
                .nullable()
            ),
            [some_model(), other_model(), AnotherModel()],
            id="nested left joins",
        ),
        pytest.param(
            lambda: Query()
            .from_(SomeModel())
            .select(FieldMask.exclude())
            .where(column("some.id") == 2 * ID)
            .join(
                Query()
                .from_(OtherModel())
                .select(FieldMask.exclude())
                .join(
                    Query()
                    .from_(AnotherModel())
                    .select(FieldMask.exclude())
                    .where(column("another.id") == ID)
                    .nullable()
                )
                .nullable()
            ),
            [some_different_model(), OtherModel(), AnotherModel()],
            id="unmatched optional join hides its nested joins",
        ),
    ]


class TestFetch:

    @pytest.fixture(autouse=True)
    def _rows(self, insert):
        insert(some_model(), some_different_model(), other_model(), another_model())

    @pytest.mark.parametrize("make_query,expected", _fetch_cases())
    def test_fetch(self, connection, make_query, expected):
        assert make_query().with_connection(connection).fetch() == expected

    def test_fetch_without_match_raises(self, connection):
        query = Query().with_connection(connection).from_(SomeModel()).where(column("id") == 1)
        with pytest.raises(NoResultFound):
            query.fetch()

    def test_fetch_takes_first_of_many_rows(self, connection):
        rows = (
            Query()
            .with_connection(connection)
            .from_(SomeModel())
            .order_by("id", Order.DESC)
            .fetch()
        )
        assert rows == [some_different_model()]

    def test_order_by_joined_column(self, connection):
        rows = (
            Query()
            .with_connection(connection)
            .from_(SomeModel())
            .select(FieldMask.include("id"))
            .join(Query().from_(OtherModel()).select(FieldMask.include("id")).nullable())
            .order_by("other.id", Order.ASC)
            .list()
        )
        # NULLs sort first on SQLite
        assert rows == [
            [SomeModel(id=2 * ID), OtherModel()],
            [SomeModel(id=ID), OtherModel(id=ID)],
        ]

    def test_nullable_on_top_level_marks_last_join(self, connection):
        query = (
            Query()
            .with_connection(connection)
            .from_(SomeModel())
            .join(Query().from_(OtherModel()))
            .nullable()
            .order_by("id", Order.ASC)
        )

        assert query.list() == [
            [some_model(), other_model()],
            [some_different_model(), OtherModel()],
        ]
        assert query.count() == 2


class TestList:

    @pytest.fixture(autouse=True)
    def _rows(self, insert):
        self.resources = [OtherModel(id=i, value=float(i)) for i in range(4)]
        insert(*self.resources)

    @pytest.mark.parametrize(
        "configure,expected",
        [
            pytest.param(
                lambda q: q.where(column("value") >= 2).order_by("value", Order.ASC),
                [2, 3],
                id="filter",
            ),
            pytest.param(lambda q: q.limit(2).order_by("value", Order.ASC), [0, 1], id="limit"),
            pytest.param(lambda q: q.order_by("value", Order.DESC), [3, 2, 1, 0], id="order"),
            pytest.param(
                lambda q: q.limit(2).offset(2).order_by("value", Order.ASC), [2, 3], id="offset"
            ),
            pytest.param(
                lambda q: q.where(column("value") < 3).limit(1).offset(1).order_by("value", Order.DESC),
                [1],
                id="filtering and pagination",
            ),
        ],
    )
    def test_list(self, connection, configure, expected):
        query = configure(Query())
        rows = (
            query.with_connection(connection)
            .select(FieldMask.include("id", "value"))
            .from_(OtherModel())
            .list()
        )

        assert all(len(row) == 1 for row in rows)
        assert [row[0] for row in rows] == [self.resources[i] for i in expected]

    def test_list_without_match_is_empty(self, connection):
        query = Query().with_connection(connection).from_(OtherModel()).where(column("value") > 10)
        assert query.list() == []


class TestConfigurationErrors:

    def test_update_requires_predicate(self, connection):
        query = Query().with_connection(connection).from_(some_model())
        with pytest.raises(ConfigurationError) as exc_info:
            query.update()
        assert exc_info.value.error_code == ErrorCode.MISSING_PREDICATE

    def test_delete_requires_predicate(self, connection):
        with pytest.raises(ConfigurationError) as exc_info:
            Query().with_connection(connection).from_(SomeModel()).delete()
        assert exc_info.value.error_code == ErrorCode.MISSING_PREDICATE

    def test_delete_requires_entity(self, connection):
        with pytest.raises(ConfigurationError) as exc_info:
            Query().with_connection(connection).where(column("id") == 1).delete()
        assert exc_info.value.error_code == ErrorCode.MISSING_ENTITY

    def test_empty_update_is_rejected(self, connection):
        query = (
            Query()
            .with_connection(connection)
            .from_(some_model())
            .select(FieldMask.include())
            .where(column("id") == ID)
        )
        with pytest.raises(ConfigurationError):
            query.update()

    def test_query_without_connection(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Query().from_(SomeModel()).list()
        assert exc_info.value.error_code == ErrorCode.MISSING_CONNECTION

    def test_unknown_mask_column(self, connection):
        query = Query().with_connection(connection).from_(SomeModel()).select(FieldMask.include("missing"))
        with pytest.raises(ConfigurationError) as exc_info:
            query.list()
        assert exc_info.value.error_code == ErrorCode.UNKNOWN_COLUMN

    def test_unknown_predicate_column(self, connection):
        query = Query().with_connection(connection).from_(SomeModel()).where(column("missing") == 1)
        with pytest.raises(ConfigurationError) as exc_info:
            query.count()
        assert exc_info.value.error_code == ErrorCode.UNKNOWN_COLUMN

    def test_unknown_order_column(self, connection):
        query = Query().with_connection(connection).from_(SomeModel()).order_by("missing")
        with pytest.raises(ConfigurationError) as exc_info:
            query.list()
        assert exc_info.value.error_code == ErrorCode.UNKNOWN_COLUMN

    def test_pagination_on_nested_join(self, connection):
        query = (
            Query()
            .with_connection(connection)
            .from_(SomeModel())
            .join(Query().from_(OtherModel()).limit(1))
        )
        with pytest.raises(ConfigurationError) as exc_info:
            query.list()
        assert exc_info.value.error_code == ErrorCode.UNSUPPORTED_ON_JOIN

    def test_join_without_relation(self, connection):
        query = (
            Query()
            .with_connection(connection)
            .from_(SomeModel())
            .join(Query().from_(ModelWithUniqueFields()))
        )
        with pytest.raises(ConfigurationError) as exc_info:
            query.fetch()
        assert exc_info.value.error_code == ErrorCode.MISSING_RELATION

    def test_write_with_join_is_rejected(self, connection):
        query = (
            Query()
            .with_connection(connection)
            .from_(some_model())
            .join(Query().from_(OtherModel()))
        )
        with pytest.raises(ConfigurationError) as exc_info:
            query.insert()
        assert exc_info.value.error_code == ErrorCode.UNSUPPORTED_ON_JOIN

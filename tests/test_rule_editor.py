from viewgate.core.rules import ConditionalHidden, MatchType, RuleSet, ViewItem, ViewRule
from viewgate.services.rule_editor import (
    ALL_VIEWS_ID,
    ViewEdit,
    build_editor_rows,
    collect_edits,
    editor_views,
    group_options,
    upsert_rule,
    view_type_label,
)

CATALOG = [
    ViewItem(id="5003", name="Schedule", type="CALENDAR", index=2),
    ViewItem(id="5001", name="All records", type="LIST", index=0),
    ViewItem(id="5002", name="Board", type="CUSTOM", index=1),
    ViewItem(id="5004", name="Gantt", type="GANTT", index=1),
]


def test_view_type_labels_pass_unknown_types_through():
    assert view_type_label("LIST") == "List"
    assert view_type_label("CALENDAR") == "Calendar"
    assert view_type_label("CUSTOM") == "Custom"
    assert view_type_label("GANTT") == "GANTT"


def test_editor_views_sorted_by_index_with_all_views_last():
    views = editor_views(CATALOG)
    assert [view.id for view in views] == ["5001", "5002", "5004", "5003", ALL_VIEWS_ID]
    assert views[-1].name == "(all)"
    assert views[-1].type == "LIST"


def test_editor_views_does_not_duplicate_all_views_entry():
    views = editor_views([ViewItem(id=ALL_VIEWS_ID, name="(all)", index=0)])
    assert [view.id for view in views] == [ALL_VIEWS_ID]


def test_build_editor_rows_reflect_rules():
    rule_set = RuleSet(
        [
            ViewRule(view_id="5002", always_hidden=True),
            ViewRule(
                view_id=ALL_VIEWS_ID,
                conditional_hidden=ConditionalHidden(enabled=True, match_type=MatchType.not_includes, group_codes=["G1"]),
            ),
            ViewRule(view_id="5002", always_hidden=False),
        ]
    )
    rows = {row.view_id: row for row in build_editor_rows(CATALOG, rule_set)}

    assert rows["5001"].visible is True
    assert rows["5001"].conditional_hidden == ConditionalHidden()
    assert rows["5002"].visible is False
    assert rows["5002"].type_label == "Custom"
    assert rows["5004"].type_label == "GANTT"
    assert rows[ALL_VIEWS_ID].conditional_hidden.match_type == MatchType.not_includes
    assert rows[ALL_VIEWS_ID].conditional_hidden.group_codes == ["G1"]


def test_upsert_rule_updates_first_match_in_place():
    rule_set = RuleSet([ViewRule(view_id="1"), ViewRule(view_id="2"), ViewRule(view_id="1", always_hidden=True)])
    updated = upsert_rule(rule_set, ViewRule(view_id="1", always_hidden=True))

    assert [rule.view_id for rule in updated] == ["1", "2", "1"]
    assert updated.rule_for("1").always_hidden is True
    # input set is untouched
    assert rule_set.rule_for("1").always_hidden is False


def test_upsert_rule_appends_new_view():
    updated = upsert_rule(RuleSet([ViewRule(view_id="1")]), ViewRule(view_id=ALL_VIEWS_ID, always_hidden=True))
    assert [rule.view_id for rule in updated] == ["1", ALL_VIEWS_ID]


def test_collect_edits_creates_one_rule_per_view_in_order():
    edits = {
        "5002": ViewEdit(visible=False),
        ALL_VIEWS_ID: ViewEdit(condition_enabled=True, match_type=MatchType.not_includes, group_codes=["G1", "G2"]),
    }
    rule_set = collect_edits(["5001", "5002", ALL_VIEWS_ID], edits)

    assert [rule.view_id for rule in rule_set] == ["5001", "5002", ALL_VIEWS_ID]
    assert rule_set.rule_for("5001") == ViewRule(view_id="5001")
    assert rule_set.rule_for("5002").always_hidden is True
    all_views = rule_set.rule_for(ALL_VIEWS_ID)
    assert all_views.always_hidden is False
    assert all_views.conditional_hidden == ConditionalHidden(enabled=True, match_type=MatchType.not_includes, group_codes=["G1", "G2"])


def test_group_options_skip_groups_without_code():
    options = group_options([{"code": "sales", "name": "Sales"}, {"name": "No code"}, {"code": "ops"}])
    assert [(option.label, option.value) for option in options] == [("Sales", "sales"), ("ops", "ops")]

from curricula.services import queries


def slugs_of(resources):
    return [r.slug for r in resources]


def test_list_resources_featured_first_then_newest(db, category, make_resource):
    make_resource("old", category, age_days=10)
    make_resource("new", category, age_days=1)
    make_resource("old-featured", category, age_days=30, featured=True)
    make_resource("newest", category, age_days=0)

    assert slugs_of(queries.list_resources(db)) == ["old-featured", "newest", "new", "old"]


def test_list_resources_filters_by_category(db, category, design, make_resource):
    make_resource("focus", category)
    make_resource("layout", design)

    assert slugs_of(queries.list_resources(db, category_slug="design")) == ["layout"]
    assert queries.list_resources(db, category_slug="cooking") == []


def test_list_resources_filters_by_tag_and_category(db, category, design, tags, make_resource):
    habits = next(t for t in tags if t.slug == "habits")
    make_resource("atomic-habits", category, tags=[habits])
    make_resource("design-habits", design, tags=[habits])
    make_resource("untagged", category)

    assert sorted(slugs_of(queries.list_resources(db, tag_slug="habits"))) == ["atomic-habits", "design-habits"]
    assert slugs_of(queries.list_resources(db, category_slug="productivity", tag_slug="habits")) == ["atomic-habits"]


def test_list_resources_loads_creator_category_and_tags(db, category, tags, make_resource):
    make_resource("focus", category, tags=tags[:2])

    [resource] = queries.list_resources(db)
    assert resource.creator.name == "Cal Newport"
    assert resource.category.slug == "productivity"
    assert len(resource.tags) == 2


def test_get_resource_by_slug(db, category, make_resource):
    make_resource("focus", category)

    assert queries.get_resource_by_slug(db, "focus").title == "Focus"
    assert queries.get_resource_by_slug(db, "missing") is None


def test_related_resources_exclude_current_and_other_categories(db, category, design, make_resource):
    current = make_resource("current", category)
    for i in range(5):
        make_resource(f"same-{i}", category, age_days=i + 1)
    make_resource("elsewhere", design)

    related = queries.get_related_resources(db, category.id, current.id)

    assert slugs_of(related) == ["same-0", "same-1", "same-2", "same-3"]


def test_creator_page_queries(db, category, make_resource):
    make_resource("first", category, age_days=2)
    make_resource("second", category, age_days=1)

    creator = queries.get_creator_by_slug(db, "cal-newport")
    assert creator.name == "Cal Newport"
    assert slugs_of(queries.get_resources_by_creator(db, creator.id)) == ["second", "first"]
    assert queries.get_creator_by_slug(db, "nobody") is None


def test_get_category_by_slug(db, seeded):
    assert queries.get_category_by_slug(db, "finance").name == "Finance"
    assert queries.get_category_by_slug(db, "cooking") is None


def test_categories_with_counts_include_empty_categories(db, category, design, make_resource):
    make_resource("a", category)
    make_resource("b", category)
    make_resource("c", design)

    counts = {c["slug"]: c["resource_count"] for c in queries.get_categories_with_counts(db)}

    assert counts["productivity"] == 2
    assert counts["design"] == 1
    assert counts["finance"] == 0
    assert len(counts) == 6


def test_tags_with_counts(db, category, tags, make_resource):
    career = next(t for t in tags if t.slug == "career")
    habits = next(t for t in tags if t.slug == "habits")
    make_resource("a", category, tags=[career, habits])
    make_resource("b", category, tags=[habits])

    counts = {t["slug"]: t["resource_count"] for t in queries.get_tags_with_counts(db)}

    assert counts["habits"] == 2
    assert counts["career"] == 1
    assert counts["investing"] == 0


def test_reference_lists_are_sorted_by_name(db, seeded, make_creator):
    make_creator(name="Tiago Forte", slug="tiago-forte")
    make_creator(name="Ali Abdaal", slug="ali-abdaal")

    assert [c.name for c in queries.list_creators(db)] == ["Ali Abdaal", "Tiago Forte"]
    names = [c.name for c in queries.list_categories(db)]
    assert names == sorted(names)
    tag_names = [t.name for t in queries.list_tags(db)]
    assert tag_names == sorted(tag_names)

"""
Basic usage example for lucenesearch.
"""

from lucenesearch import InMemoryIndex, ModelRegistry, Search, SearchContext


ARTICLES = {
    1: {"_type": "Article", "id": 1, "title": "Introduction to full-text search",
        "body": "Inverted indexes map every term to the documents containing it."},
    2: {"_type": "Article", "id": 2, "title": "Fuzzy matching",
        "body": "Edit distance lets a search tolerate typos in query terms."},
    3: {"_type": "Article", "id": 3, "title": "Phrase queries",
        "body": "A phrase query matches terms in order, optionally within a slop."},
    4: {"_type": "Article", "id": 4, "title": "Boolean search",
        "body": "Required, prohibited and optional clauses combine into one query."},
}


def load_articles(ids):
    return [ARTICLES[i] for i in ids if i in ARTICLES]


def show(label, models):
    print(f"   {label}:")
    for model in models:
        print(f"   - {model['id']}: {model['title']}")


def main():
    print("=" * 60)
    print("lucenesearch Basic Usage Example")
    print("=" * 60)
    
    # 1. Register models
    print("\n1. Registering models...")
    registry = ModelRegistry()
    registry.register("Article", fields=["title", "body"], loader=load_articles)
    print(f"   Registered: {registry.names()}")
    
    # 2. Index
    print("\n2. Indexing...")
    search = Search(InMemoryIndex(), registry, context=SearchContext(), per_page=2)
    count = search.update_many(ARTICLES.values())
    print(f"   Indexed {count} articles")
    
    # 3. Phrase and term queries
    print("\n3. Querying...")
    show("where title = 'phrase queries'", search.where("title", "phrase queries").get())
    show("find 'query' anywhere", search.find("query").get())
    
    # 4. Fuzzy and proximity
    print("\n4. Fuzzy and proximity...")
    show("find 'serch~0.7'", search.find("serch", fuzzy=0.7).get())
    show("where body 'terms order'~2", search.where("body", "terms order", proximity=2).get())
    
    # 5. Required / prohibited / optional clauses
    print("\n5. Combining clauses...")
    runner = (
        search.query()
        .find("search", ["title", "body"])
        .where("title", "fuzzy", prohibited=True)
    )
    show("search, not 'fuzzy' in title", runner.get())
    print(f"   Last query: {search.last_query}")
    
    # 6. Raw query with a filter
    print("\n6. Raw query...")
    runner = search.raw_query("title:(boolean OR phrase)")
    runner.add_filter(lambda query: f"{query} AND NOT body:slop")
    show("raw query", runner.get())
    
    # 7. Pagination
    print("\n7. Pagination...")
    page = search.find("query terms").paginate(page=1)
    print(f"   Page {page.current_page}/{page.last_page}, total {page.total}")
    show("page items", page)
    
    # 8. Update and delete
    print("\n8. Update and delete...")
    ARTICLES[2]["title"] = "Approximate matching"
    search.update(ARTICLES[2])
    show("find 'approximate'", search.find("approximate").get())
    
    deleted = search.find("boolean", "title").delete()
    print(f"   Deleted {deleted} article(s); {len(search.index())} remain indexed")
    
    print("\n" + "=" * 60)
    print("Example completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()

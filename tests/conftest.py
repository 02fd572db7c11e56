import pytest

from devshelf.config import Document
from devshelf.normalize import TextProcessor
from devshelf.vectors import build_vector_model
from devshelf.service import SearchEngine


BOOK_RECORDS = [
    {
        "id": 1,
        "title": "Clean Code",
        "author": "Robert C. Martin",
        "description": "A handbook of agile software craftsmanship.",
        "category": "Software Engineering",
        "language": "Java",
        "tags": ["best practices", "refactoring"],
        "rating": 4.7,
    },
    {
        "id": 2,
        "title": "The Clean Coder",
        "author": "Robert C. Martin",
        "description": "A code of conduct for professional programmers.",
        "category": "Professional Development",
        "language": "",
        "tags": ["career"],
        "rating": 4.4,
    },
    {
        "id": 3,
        "title": "Design Patterns",
        "author": "Erich Gamma",
        "description": "Elements of reusable object-oriented software.",
        "category": "Software Design",
        "language": "C++",
        "tags": ["oop", "patterns"],
        "rating": 4.5,
    },
    {
        "id": 4,
        "title": "Descriptive Statistics",
        "author": "Jane Doe",
        "description": "Summarising data with numbers and charts.",
        "category": "Statistics",
        "language": "R",
        "tags": ["data"],
        "rating": 3.9,
    },
    {
        "id": 5,
        "title": "Python Crash Course",
        "author": "Eric Matthes",
        "description": "A hands-on, project-based introduction to programming.",
        "category": "Programming",
        "language": "Python",
        "tags": ["beginner"],
        "rating": 4.6,
    },
    {
        "id": 6,
        "title": "Python",
        "author": "Guido Example",
        "description": "The language reference.",
        "category": "Programming",
        "language": "Python",
        "tags": ["reference"],
        "rating": 4.0,
    },
    {
        "id": 7,
        "title": "Algorithms Unlocked",
        "author": "Thomas Cormen",
        "description": "How computer algorithms work.",
        "category": "Algorithms",
        "language": "Pseudocode",
        "tags": ["algorithms"],
        "rating": 4.2,
    },
    {
        "id": 8,
        "title": "Refactoring",
        "author": "Martin Fowler",
        "description": "Improving the design of existing code.",
        "category": "Software Engineering",
        "language": "Java",
        "tags": ["refactoring"],
        "rating": 4.8,
    },
]


@pytest.fixture
def documents():
    return [Document.model_validate(r) for r in BOOK_RECORDS]


@pytest.fixture
def doc_map(documents):
    return {d.id: d for d in documents}


@pytest.fixture
def tokenizer():
    return TextProcessor()


@pytest.fixture
def model(documents, tokenizer):
    return build_vector_model(documents, tokenizer)


@pytest.fixture
def engine(documents, model, tokenizer):
    return SearchEngine(documents, model, tokenizer)


@pytest.fixture
def records():
    return [dict(r) for r in BOOK_RECORDS]

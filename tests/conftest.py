"""Shared fixtures: a small blog schema in SDL and its normalized forms."""

from datetime import datetime

import pytest

from gql_ormgen.core.config import CodegenConfig
from gql_ormgen.core.introspection import RawSchema
from gql_ormgen.core.parser import normalize

BLOG_SDL = '''
scalar DateTime

"Access level of a user"
enum Role {
  ADMIN
  EDITOR
  READER
}

interface Node {
  id: ID!
}

"A registered user"
type User implements Node {
  id: ID!
  name: String!
  email: String
  role: Role!
  createdAt: DateTime
}

type Category implements Node {
  id: ID!
  title: String!
  parentId: ID
}

type Post implements Node {
  id: ID!
  title: String!
  body: String
  categoryId: ID!
  authorId: ID
  author: User
  tags: [String!]!
  rating: Float
  views: Int
  published: Boolean!
}

union SearchResult = User | Post

input NewPostInput {
  title: String!
}

type Query {
  posts: [Post!]!
  search(term: String!): [SearchResult!]!
}
'''

GENERATED_AT = datetime(2024, 1, 15, 10, 30, 0)


@pytest.fixture
def blog_raw():
    return RawSchema.from_sdl(BLOG_SDL)


@pytest.fixture
def blog_ir(blog_raw):
    return normalize(blog_raw, exclude_root_types=True)


@pytest.fixture
def make_config():
    """Build a CodegenConfig with a placeholder URL."""

    def _make(**overrides):
        return CodegenConfig(url="http://localhost:4000/graphql", **overrides)

    return _make


@pytest.fixture
def blog_sdl():
    return BLOG_SDL


@pytest.fixture
def generated_at():
    return GENERATED_AT

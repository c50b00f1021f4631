"""GraphQL documents sent to the platform."""

USER_QUERY = """{
  user {
    id
    login
  }
}"""

XP_TRANSACTIONS_QUERY = """{
  transaction(where: { type: { _eq: "xp" } }) {
    id
    type
    amount
    objectId
    userId
    createdAt
    path
    object {
      id
      name
      type
    }
  }
}"""

AUDIT_RESULTS_QUERY = """{
  result(where: { type: { _eq: "audit" } }) {
    id
    grade
    type
    objectId
    userId
    createdAt
    path
    object {
      id
      name
      type
    }
  }
}"""

PROGRESS_QUERY = """{
  progress(order_by: { createdAt: asc }) {
    id
    grade
    path
    createdAt
  }
}"""

OBJECT_NAMES_QUERY = """query getObjects($ids: [Int!]) {
  object(where: { id: { _in: $ids } }) {
    id
    name
    type
  }
}"""

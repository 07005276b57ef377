"""GraphQL documents sent to the GitHub API."""

ITEMS_PAGE_SIZE = 100
FIELDS_PAGE_SIZE = 50
FIELD_VALUES_PAGE_SIZE = 50

# Sub-issues and issue types are still behind feature flags.
GRAPHQL_FEATURES = "sub_issues,issue_types"

PROJECT_SCHEMA_QUERY = f"""
query ($org: String!, $number: Int!) {{
  organization(login: $org) {{
    projectV2(number: $number) {{
      id
      fields(first: {FIELDS_PAGE_SIZE}) {{
        nodes {{
          ... on ProjectV2SingleSelectField {{
            id
            name
            options {{
              id
              name
            }}
          }}
          ... on ProjectV2FieldCommon {{
            id
            name
            __typename
          }}
        }}
      }}
    }}
  }}
}}
"""

PROJECT_ITEMS_QUERY = f"""
query ($org: String!, $number: Int!, $after: String) {{
  organization(login: $org) {{
    projectV2(number: $number) {{
      items(first: {ITEMS_PAGE_SIZE}, after: $after) {{
        nodes {{
          id
          fieldValues(first: {FIELD_VALUES_PAGE_SIZE}) {{
            nodes {{
              ... on ProjectV2ItemFieldSingleSelectValue {{
                field {{
                  ... on ProjectV2SingleSelectField {{
                    id
                    name
                  }}
                }}
                optionId
              }}
            }}
          }}
          content {{
            ... on Issue {{
              id
            }}
          }}
        }}
        pageInfo {{
          hasNextPage
          endCursor
        }}
      }}
    }}
  }}
}}
"""

ISSUE_PARENT_QUERY = """
query ($id: ID!) {
  node(id: $id) {
    ... on Issue {
      id
      parent {
        id
        issueType {
          id
          name
        }
      }
    }
  }
}
"""

SET_FIELD_OPTION_MUTATION = """
mutation ($projectId: ID!, $itemId: ID!, $fieldId: ID!, $value: ProjectV2FieldValue!) {
  updateProjectV2ItemFieldValue(
    input: {projectId: $projectId, itemId: $itemId, fieldId: $fieldId, value: $value}
  ) {
    projectV2Item {
      id
    }
  }
}
"""

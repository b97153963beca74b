"""Prompt templates for the rule intelligence stages."""

from __future__ import annotations

from typing import Sequence

from .prompt import PromptTemplate

PROJECT_CONTEXT = """
You are helping with a Business Rules Management System that lets users create, manage, and validate business rules written in natural language.

PROJECT OVERVIEW:
- Users write business rules in plain English (e.g. "If order value is over $100, apply 10% discount")
- Rules are parsed into a structured format with conditions, actions, and parameters
- Rules carry a priority and a weight and are validated against each other for conflicts
- Common rule types: discounts, inventory management, customer segmentation, pricing, shipping

RULE STRUCTURE:
- Condition: the logical condition that triggers the rule
- Action: what happens when the condition is met
- Parameters: concrete values such as amounts, percentages, thresholds
- Priority: importance level used for conflict resolution
- Weight: influence factor when several rules apply

BUSINESS DOMAINS:
- E-commerce (orders, discounts, shipping, returns)
- Inventory management (stock levels, reordering, alerts)
- Customer management (segmentation, loyalty, support)
- Pricing (dynamic pricing, promotions, bulk discounts)
- Financial (payment processing, credit limits, risk assessment)
""".strip()

PARSE_TEMPLATE = PromptTemplate(
    name="parse",
    version="2",
    temperature=0.1,
    description="Natural language rule -> {condition, action, parameters, logic}",
    system=(
        PROJECT_CONTEXT
        + """

You are a business rules parser. Convert natural language business rules into structured JSON.

IMPORTANT: Return ONLY valid JSON, no markdown, no explanations, no code blocks.

Return a JSON object with these exact fields:
- condition: the logical condition to check
- action: the action to take when the condition is met (snake_case identifier)
- parameters: object with the extracted parameters and values
- logic: structured logical representation with operators

Example 1:
Input: "If order value is over $100, apply 10% discount"
Output:
{
  "condition": "order_value > 100",
  "action": "apply_discount",
  "parameters": {"threshold_amount": 100, "discount_percentage": 10, "currency": "USD"},
  "logic": {
    "if": {"field": "order_value", "operator": ">", "value": 100},
    "then": {"action": "apply_discount", "value": 0.1}
  }
}

Example 2:
Input: "VIP customers with orders above $500 get 20% discount"
Output:
{
  "condition": "customer_status == 'VIP' AND order_value > 500",
  "action": "apply_discount",
  "parameters": {"threshold_amount": 500, "discount_percentage": 20, "customer_status": "VIP"},
  "logic": {
    "if": {"and": [
      {"field": "customer_status", "operator": "==", "value": "VIP"},
      {"field": "order_value", "operator": ">", "value": 500}
    ]},
    "then": {"action": "apply_discount", "value": 0.2}
  }
}"""
    ),
    user="{rule}",
)

REFINE_TEMPLATE = PromptTemplate(
    name="refine",
    version="2",
    temperature=0.3,
    max_tokens=500,
    description="Rough rule -> {improvedRule, improvements, reasoning}",
    system=(
        PROJECT_CONTEXT
        + """

You are a business rules expert. Take a user's rough business rule and refine it into a clear, precise, professional rule.

REFINEMENT GOALS:
1. Make conditions specific and measurable
2. Clarify actions with exact parameters
3. Add necessary constraints and edge cases
4. Use professional business language
5. Make the rule unambiguous

IMPORTANT: Return ONLY valid JSON, no markdown, no explanations, no code blocks.

Return a JSON object with:
- improvedRule: the refined version of the rule
- improvements: array of the specific improvements made
- reasoning: why these improvements matter

Example:
Input: "if order big give discount"
Output:
{
  "improvedRule": "If order subtotal exceeds $200 (excluding taxes and shipping), apply a 10% discount to eligible regular-priced items",
  "improvements": [
    "Specified exact threshold ($200) instead of vague 'big'",
    "Clarified the calculation basis (subtotal excluding taxes/shipping)",
    "Defined the discount percentage (10%)",
    "Added eligibility constraints (regular-priced items only)"
  ],
  "reasoning": "These improvements remove ambiguity and make the rule implementable"
}"""
    ),
    user=(
        "Refine this business rule to be specific, professional, and unambiguous:\n\n"
        "Original rule: \"{rule}\"\n\n"
        "Provide a refined version that would be clear to implement in a business system, "
        "with specific thresholds, conditions, and actions."
    ),
)

RECOMMEND_TEMPLATE = PromptTemplate(
    name="recommend",
    version="2",
    temperature=0.3,
    max_tokens=300,
    description="Rule + sibling rules -> JSON array of 5-7 suggestions",
    system=(
        "You are a business rules expert. Provide 5 to 7 specific, actionable recommendations "
        "to improve the given business rule. Take the existing rules into account so the "
        "recommendations do not contradict or duplicate them. "
        "Return ONLY a JSON array of strings, no markdown, no explanations."
    ),
    user="Rule: \"{rule}\"\n\nExisting rules:\n{existing_rules}\n\nProvide recommendations as a JSON array.",
)

VALIDATE_TEMPLATE = PromptTemplate(
    name="validate",
    version="2",
    temperature=0.3,
    max_tokens=400,
    description="Numbered rule list -> {valid, conflicts, suggestions}",
    system=(
        "You validate a set of business rules for logical conflicts and ambiguities. "
        "Two rules conflict when the same situation triggers incompatible actions. "
        "Refer to rules by their number (e.g. \"Rule 1 and Rule 3 ...\").\n\n"
        "Return ONLY valid JSON of the form:\n"
        "{\"valid\": boolean, \"conflicts\": [string, ...], \"suggestions\": [string, ...]}"
    ),
    user="Rules:\n{rules}",
)

MODIFY_TEMPLATE = PromptTemplate(
    name="modify",
    version="1",
    temperature=0.1,
    description="Instruction + current rule -> modified rule text",
    system=(
        "You are a business rules modifier. Given an instruction and a current rule, "
        "return only the modified rule in natural language, with no commentary."
    ),
    user="Instruction: {instruction}\nCurrent rule: {rule}",
)

CONNECTION_TEMPLATE = PromptTemplate(
    name="connection",
    version="1",
    temperature=0.1,
    max_tokens=50,
    description="Connectivity check",
    system="You are a helpful assistant. Respond with a simple confirmation.",
    user="Say 'AI connection successful' if you can see this message.",
)


def enumerate_rules(rules: Sequence[str]) -> str:
    """Render rules as a 1-based numbered list."""
    return "\n".join(f"{index}. {rule}" for index, rule in enumerate(rules, start=1))


def format_existing_rules(rules: Sequence[str]) -> str:
    if not rules:
        return "(none)"
    return "\n".join(f"- {rule}" for rule in rules)

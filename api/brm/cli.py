import argparse
import logging
import sys
from typing import Any, Callable

from .client import DEFAULT_BASE_URL, ApiError, BrmClient, filter_assessments
from .wizard import ResponseWizard, WizardError, coerce_answer


def _prompt_question(question: dict[str, Any], current: Any, ask: Callable[[str], str]) -> Any:
    label = f"{question.get('text')}{' *' if question.get('required') else ''}"
    options = question.get("options") or []
    while True:
        print(f"\n{label}")
        for idx, option in enumerate(options, start=1):
            print(f"  {idx}. {option}")
        if current not in (None, "", []):
            print(f"  (current: {current}; press enter to keep)")
        raw = ask("> ")
        if not raw.strip() and current not in (None, "", []):
            return current
        try:
            return coerce_answer(question, raw)
        except WizardError as exc:
            print(f"  {exc}")


def run_wizard(wizard: ResponseWizard, ask: Callable[[str], str] = input) -> None:
    wizard.load()
    print(f"Assessment: {wizard.assessment.get('name')}  status: {wizard.status}")
    if wizard.is_submitted:
        print("This assessment has already been submitted.")
        return

    while True:
        section = wizard.current_section
        if section is None:
            print("Template has no sections.")
            return
        done = "done" if wizard.section_completed[wizard.active_section] else "open"
        print(f"\n== [{wizard.active_section + 1}/{len(wizard.sections)}] {section.get('title')} ({done})")
        sid = str(section.get("id"))
        for question in section.get("questions") or []:
            qid = str(question.get("id"))
            value = _prompt_question(question, wizard.answers.get((sid, qid)), ask)
            if value != wizard.answers.get((sid, qid)):
                wizard.answer(sid, qid, value)
        if not wizard.next():
            break

    if not wizard.can_submit:
        open_sections = [s.get("title") for s, ok in zip(wizard.sections, wizard.section_completed) if not ok]
        print(f"\nSaved. Incomplete sections: {', '.join(str(t) for t in open_sections)}")
        return
    if ask("\nSubmit assessment? [y/N] ").strip().lower() == "y":
        wizard.submit()
        print(f"Submitted at {wizard.response.get('submittedAt')}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fill in an assessment response from the terminal")
    parser.add_argument("assessment_id", nargs="?", default="")
    parser.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL)
    parser.add_argument("--api-prefix", type=str, default="/api")
    parser.add_argument("--list", action="store_true", help="list assessments instead of filling one")
    parser.add_argument("--search", type=str, default="")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    with BrmClient(base_url=args.base_url, api_prefix=args.api_prefix) as client:
        try:
            if args.list or not args.assessment_id:
                accounts = {str(a.get("id")): a for a in client.get_accounts()}
                for assessment in filter_assessments(client.get_assessments(), args.search, accounts):
                    account = accounts.get(str(assessment.get("accountId"))) or {}
                    print(f"{assessment.get('id')}  {assessment.get('name')}  [{assessment.get('status')}]  {account.get('Name', '-')}")
                return 0
            run_wizard(ResponseWizard(client, args.assessment_id))
        except ApiError as exc:
            print(f"error: {exc.message}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Link Finicity test accounts and answer their MFA challenges

Walks the sandbox flow against the live API: look up a customer, fill in the
login form of a test institution, add all accounts, and answer MFA
challenges until the accounts are returned. Answers are read from the
terminal; press Enter to send the default answer "success".
"""
import sys
import argparse
import logging

from dotenv import load_dotenv

from finicity_client import (
    AccountLoginForm,
    ChallengeLimitError,
    ChallengeSet,
    ConfigurationError,
    FinicityClient,
    FinicityError,
    resolve_challenges,
)

load_dotenv()

# Finicity's test institution; see the "Testing Accounts" guide for other login values
TEST_INSTITUTION_ID = '101732'
DEFAULT_ANSWER = 'success'


def prompt_answers(challenge_set: ChallengeSet):
    """Ask the user for the answer to every question"""
    print()
    print(f"MFA challenge received (session {challenge_set.session[:12]}...)")
    for question in challenge_set.questions:
        print(f"  ? {question.text}")
        for value, label in question.choices.items():
            print(f"      - {label} [{value}]")
        if question.image_choices:
            print(f"      ({len(question.image_choices)} image choices)")
        answer = input(f"    Answer [{DEFAULT_ANSWER}]: ").strip()
        question.answer = answer or DEFAULT_ANSWER


def link_accounts(client: FinicityClient, customer_id: str, institution_id: str,
                  username: str, password: str, max_rounds: int):
    institutions = client.get_institution_operations()
    details = institutions.get_institution_details(institution_id)
    login_form = details.login_form
    if login_form is None or len(login_form.login_fields) < 2:
        print(f"❌ Institution {institution_id} has no usable login form")
        return None

    login_form.login_fields[0].value = username
    login_form.login_fields[1].value = password
    print(f"✓ Login form for {details.institution.name if details.institution else institution_id}")

    accounts = client.get_account_operations()
    result = accounts.add_all_accounts(customer_id, institution_id,
                                       AccountLoginForm.from_login_form(login_form))

    return resolve_challenges(
        result,
        prompt_answers,
        lambda challenge: client.get_account_operations().add_all_accounts_mfa(
            challenge.session, customer_id, institution_id, challenge),
        max_rounds=max_rounds,
    )


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument('customer_id', help='Finicity customer id (a testing customer)')
    parser.add_argument('--institution', default=TEST_INSTITUTION_ID)
    parser.add_argument('--username', default='tfa_text',
                        help="test login; 'tfa_text' answers with text questions")
    parser.add_argument('--password', default='go')
    parser.add_argument('--max-rounds', type=int, default=5)
    parser.add_argument('--suffix', default='', help='credential set suffix, e.g. 2 for FINICITY_APP_KEY_2')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    print("=" * 80)
    print("Finicity - Link Test Accounts")
    print("=" * 80)

    try:
        with FinicityClient.from_config(suffix=args.suffix) as client:
            print("✓ Authenticated")
            linked = link_accounts(client, args.customer_id, args.institution,
                                   args.username, args.password, args.max_rounds)
            if linked is None:
                return 1

            print()
            print(f"✓ {len(linked)} account(s) linked:")
            for account in linked:
                print(f"  {account.id}  {account.name:<30} {account.type.value:<14} {account.balance}")
            return 0

    except ConfigurationError as e:
        print(f"❌ Configuration Error: {e}")
        print()
        print("Make sure your .env file has:")
        print("  FINICITY_APP_KEY=your_app_key")
        print("  FINICITY_PARTNER_ID=your_partner_id")
        print("  FINICITY_PARTNER_SECRET=your_partner_secret")
        return 1

    except ChallengeLimitError as e:
        print(f"❌ {e}")
        return 1

    except FinicityError as e:
        print(f"❌ Error: {e}")
        return 1

    except KeyboardInterrupt:
        print("\n\nCancelled by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())

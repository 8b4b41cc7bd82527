import unittest

from career_tools.generation.errors import InputValidationError
from career_tools.generation.validation import (
    COVER_LETTER_INPUT,
    LEADERSHIP_INPUT,
    SALARY_INPUT,
    validate,
)

RESUME = "Senior backend engineer with eight years of Python, PostgreSQL and AWS experience."


class CoverLetterInputTests(unittest.TestCase):
    def test_valid_payload_is_trimmed(self):
        data = validate({"resume": f"  {RESUME}  ", "jobDescription": "Python engineer wanted"}, COVER_LETTER_INPUT)
        self.assertEqual(data["resume"], RESUME)
        self.assertEqual(data["jobDescription"], "Python engineer wanted")

    def test_oversized_resume_names_field_and_sizes(self):
        with self.assertRaises(InputValidationError) as ctx:
            validate({"resume": "a" * 20000, "jobDescription": "Python engineer wanted"}, COVER_LETTER_INPUT)

        self.assertEqual(ctx.exception.field, "resume")
        self.assertEqual(ctx.exception.constraint, "max_chars")
        self.assertIn("15,000", ctx.exception.message)
        self.assertIn("20,000", ctx.exception.message)

    def test_word_limit_applies_under_char_limit(self):
        resume = "a " * 2600
        with self.assertRaises(InputValidationError) as ctx:
            validate({"resume": resume, "jobDescription": "Python engineer wanted"}, COVER_LETTER_INPUT)
        self.assertEqual(ctx.exception.constraint, "max_words")

    def test_first_failing_field_in_declared_order_wins(self):
        with self.assertRaises(InputValidationError) as ctx:
            validate({"resume": "", "jobDescription": ""}, COVER_LETTER_INPUT)
        self.assertEqual(ctx.exception.field, "resume")
        self.assertEqual(ctx.exception.constraint, "required")

    def test_non_object_body_is_rejected(self):
        for payload in (None, [], "resume"):
            with self.subTest(payload=payload):
                with self.assertRaises(InputValidationError) as ctx:
                    validate(payload, COVER_LETTER_INPUT)
                self.assertEqual(ctx.exception.field, "body")

    def test_non_string_field_is_rejected(self):
        with self.assertRaises(InputValidationError) as ctx:
            validate({"resume": 12345, "jobDescription": "Python engineer wanted"}, COVER_LETTER_INPUT)
        self.assertEqual(ctx.exception.constraint, "type")


class SalaryInputTests(unittest.TestCase):
    def payload(self, **overrides):
        payload = {
            "country": "germany",
            "jobTitle": "Data Engineer",
            "yearsExperience": 5,
            "industry": "Fintech",
        }
        payload.update(overrides)
        return payload

    def test_country_is_canonicalized_and_optionals_default(self):
        data = validate(self.payload(), SALARY_INPUT)
        self.assertEqual(data["country"], "Germany")
        self.assertEqual(data["skills"], [])
        self.assertIsNone(data["city"])
        self.assertIsNone(data["workMode"])

    def test_unknown_country_is_rejected(self):
        with self.assertRaises(InputValidationError) as ctx:
            validate(self.payload(country="Atlantis"), SALARY_INPUT)
        self.assertEqual(ctx.exception.field, "country")
        self.assertEqual(ctx.exception.constraint, "choice")

    def test_years_experience_bounds_and_types(self):
        for value, constraint in ((41, "max_value"), (-1, "min_value"), (True, "type"), ("5", "type"), (2.5, "type")):
            with self.subTest(value=value):
                with self.assertRaises(InputValidationError) as ctx:
                    validate(self.payload(yearsExperience=value), SALARY_INPUT)
                self.assertEqual(ctx.exception.field, "yearsExperience")
                self.assertEqual(ctx.exception.constraint, constraint)

    def test_zero_years_is_valid(self):
        self.assertEqual(validate(self.payload(yearsExperience=0), SALARY_INPUT)["yearsExperience"], 0)

    def test_skills_list_limits(self):
        data = validate(self.payload(skills=["Spark", " ", "SQL"]), SALARY_INPUT)
        self.assertEqual(data["skills"], ["Spark", "SQL"])

        with self.assertRaises(InputValidationError) as ctx:
            validate(self.payload(skills=[f"skill {i}" for i in range(16)]), SALARY_INPUT)
        self.assertEqual(ctx.exception.constraint, "max_items")

    def test_optional_choice_is_still_checked(self):
        with self.assertRaises(InputValidationError) as ctx:
            validate(self.payload(workMode="sometimes"), SALARY_INPUT)
        self.assertEqual(ctx.exception.field, "workMode")


class LeadershipInputTests(unittest.TestCase):
    def payload(self, **overrides):
        payload = {"currentRole": "Senior Engineer", "targetRole": "Engineering Manager", "industry": "SaaS"}
        payload.update(overrides)
        return payload

    def test_defaults_for_optional_fields(self):
        data = validate(self.payload(), LEADERSHIP_INPUT)
        self.assertEqual(data["yearsExperience"], 0)
        self.assertEqual(data["teamSize"], 0)
        self.assertEqual(data["leadershipSkills"], [])
        self.assertEqual(data["softSkills"], {})
        self.assertEqual(data["achievements"], [])

    def test_soft_skill_ratings_must_be_in_range(self):
        data = validate(self.payload(softSkills={"Empathy": 4, "Listening": 5}), LEADERSHIP_INPUT)
        self.assertEqual(data["softSkills"], {"Empathy": 4, "Listening": 5})

        with self.assertRaises(InputValidationError) as ctx:
            validate(self.payload(softSkills={"Empathy": 6}), LEADERSHIP_INPUT)
        self.assertEqual(ctx.exception.field, "softSkills")
        self.assertEqual(ctx.exception.constraint, "range")

    def test_team_size_upper_bound(self):
        with self.assertRaises(InputValidationError) as ctx:
            validate(self.payload(teamSize=101), LEADERSHIP_INPUT)
        self.assertEqual(ctx.exception.field, "teamSize")


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for embedding text builders and the embedding service.
"""
import unittest

from core.embeddings import (
    EmbeddingService,
    build_job_embedding_input,
    build_student_embedding_input,
)
from tests.mocks.launchpad_mocks import MockLLMProvider


class TestEmbeddingInputs(unittest.TestCase):

    def test_job_block(self):
        text = build_job_embedding_input(
            "Backend Intern", "Build APIs.", ["SQL basics"], ["Python", "FastAPI"]
        )
        self.assertEqual(text, "\n".join([
            "Job Posting",
            "Title: Backend Intern",
            "Description: Build APIs.",
            "Requirements: SQL basics",
            "Required Skills: Python, FastAPI",
        ]))

    def test_job_empty_lists_render_none_listed(self):
        text = build_job_embedding_input("T", "D", [], None)
        self.assertIn("Requirements: None listed", text)
        self.assertIn("Required Skills: None listed", text)

    def test_student_missing_values_render_not_provided(self):
        text = build_student_embedding_input(full_name="Ada", skills=[])
        lines = text.split("\n")
        self.assertEqual(lines[0], "Student Profile")
        self.assertIn("Name: Ada", lines)
        self.assertIn("University: Not provided", lines)
        self.assertIn("Graduation: Not provided", lines)
        self.assertIn("Skills: None listed", lines)
        self.assertIn("Bio: Not provided", lines)

    def test_student_graduation_year_is_rendered(self):
        text = build_student_embedding_input(graduation_year=2027)
        self.assertIn("Graduation: 2027", text)


class TestEmbeddingService(unittest.TestCase):

    def test_embed_job_returns_vector(self):
        llm = MockLLMProvider()
        vector = EmbeddingService(llm).embed_job("Intern", "Do things", ["a"], ["Python"])
        self.assertEqual(len(vector), 1536)
        self.assertTrue(llm.embedded_texts[0].startswith("Job Posting"))

    def test_failure_returns_none(self):
        llm = MockLLMProvider(fail_embedding=True)
        service = EmbeddingService(llm)
        self.assertIsNone(service.embed_job("Intern", "Do things"))
        self.assertIsNone(service.embed_student(full_name="Ada"))


if __name__ == "__main__":
    unittest.main()

"""Declarative signal rules for technology and feature detection.

Every detection the extractor performs is one row of ``SIGNAL_RULES``. A rule
has a ``kind`` that says what it is tested against:

- ``dependency``: exact, lowercased dependency name from the manifest
- ``content``: case-insensitive substring of a fetched file's text
- ``filename``: exact, lowercased name of a fetched file
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

SignalKind = Literal["dependency", "content", "filename"]
SignalCategory = Literal["frontend", "backend", "database", "deployment", "tools", "feature"]


@dataclass(frozen=True)
class SignalRule:
    kind: SignalKind
    patterns: tuple[str, ...]
    category: SignalCategory
    label: str

    def matches(self, subject: str) -> bool:
        lowered = subject.lower()
        if self.kind == "content":
            return any(pattern in lowered for pattern in self.patterns)
        return lowered in self.patterns


@dataclass(frozen=True)
class SignalMatch:
    category: SignalCategory
    label: str


def _rule(kind: SignalKind, category: SignalCategory, label: str, *patterns: str) -> SignalRule:
    return SignalRule(kind=kind, patterns=tuple(p.lower() for p in patterns), category=category, label=label)


SIGNAL_RULES: tuple[SignalRule, ...] = (
    # Manifest dependencies
    _rule("dependency", "frontend", "React", "react", "react-dom"),
    _rule("dependency", "frontend", "React Native", "react-native", "expo"),
    _rule("dependency", "frontend", "Preact", "preact"),
    _rule("dependency", "frontend", "Next.js", "next"),
    _rule("dependency", "frontend", "Vue.js", "vue"),
    _rule("dependency", "frontend", "Nuxt.js", "nuxt"),
    _rule("dependency", "frontend", "Angular", "@angular/core"),
    _rule("dependency", "frontend", "Svelte", "svelte"),
    _rule("dependency", "frontend", "SvelteKit", "@sveltejs/kit"),
    _rule("dependency", "frontend", "Remix", "@remix-run/react"),
    _rule("dependency", "frontend", "Gatsby", "gatsby"),
    _rule("dependency", "frontend", "Tailwind CSS", "tailwindcss"),
    _rule("dependency", "frontend", "Bootstrap", "bootstrap", "react-bootstrap"),
    _rule("dependency", "frontend", "Material UI", "@mui/material", "@material-ui/core"),
    _rule("dependency", "frontend", "Chakra UI", "@chakra-ui/react"),
    _rule("dependency", "frontend", "Framer Motion", "framer-motion"),
    _rule("dependency", "frontend", "Three.js", "three", "@react-three/fiber"),
    _rule("dependency", "backend", "Express", "express"),
    _rule("dependency", "backend", "Fastify", "fastify"),
    _rule("dependency", "backend", "Koa", "koa"),
    _rule("dependency", "backend", "NestJS", "@nestjs/core"),
    _rule("dependency", "backend", "Socket.IO", "socket.io"),
    _rule("dependency", "backend", "GraphQL", "graphql", "apollo-server", "@apollo/server"),
    _rule("dependency", "backend", "Flask", "flask"),
    _rule("dependency", "backend", "Django", "django", "djangorestframework"),
    _rule("dependency", "backend", "FastAPI", "fastapi"),
    _rule("dependency", "database", "MongoDB", "mongodb", "mongoose", "pymongo"),
    _rule("dependency", "database", "PostgreSQL", "pg", "psycopg2", "psycopg2-binary", "asyncpg"),
    _rule("dependency", "database", "MySQL", "mysql", "mysql2", "pymysql"),
    _rule("dependency", "database", "SQLite", "sqlite3", "better-sqlite3"),
    _rule("dependency", "database", "Prisma", "prisma", "@prisma/client"),
    _rule("dependency", "database", "Firebase", "firebase", "firebase-admin"),
    _rule("dependency", "database", "Supabase", "@supabase/supabase-js", "supabase"),
    _rule("dependency", "database", "Redis", "redis", "ioredis"),
    _rule("dependency", "database", "SQLAlchemy", "sqlalchemy", "flask-sqlalchemy"),
    _rule("dependency", "database", "Sequelize", "sequelize"),
    _rule("dependency", "tools", "TypeScript", "typescript"),
    _rule("dependency", "tools", "ESLint", "eslint"),
    _rule("dependency", "tools", "Prettier", "prettier"),
    _rule("dependency", "tools", "Jest", "jest"),
    _rule("dependency", "tools", "Vitest", "vitest"),
    _rule("dependency", "tools", "Vite", "vite"),
    _rule("dependency", "tools", "Webpack", "webpack"),
    _rule("dependency", "tools", "Babel", "@babel/core"),
    _rule("dependency", "tools", "Pytest", "pytest"),
    _rule("dependency", "tools", "Axios", "axios"),
    _rule("dependency", "tools", "Redux", "redux", "@reduxjs/toolkit"),
    _rule("dependency", "tools", "OpenAI SDK", "openai"),
    _rule("dependency", "tools", "Google Generative AI", "@google/generative-ai", "google-generativeai"),
    _rule("dependency", "tools", "LangChain", "langchain"),
    # File names
    _rule("filename", "deployment", "Docker", "dockerfile"),
    _rule("filename", "deployment", "Docker Compose", "docker-compose.yml", "docker-compose.yaml", "compose.yml"),
    _rule("filename", "deployment", "Vercel", "vercel.json"),
    _rule("filename", "deployment", "Netlify", "netlify.toml"),
    _rule("filename", "deployment", "Heroku", "procfile"),
    _rule("filename", "deployment", "Render", "render.yaml"),
    _rule("filename", "deployment", "Firebase Hosting", "firebase.json"),
    _rule("filename", "tools", "TypeScript", "tsconfig.json"),
    _rule("filename", "tools", "Vite", "vite.config.js", "vite.config.ts"),
    _rule("filename", "frontend", "Tailwind CSS", "tailwind.config.js", "tailwind.config.ts"),
    _rule("filename", "frontend", "Next.js", "next.config.js", "next.config.mjs"),
    # Code content: technologies
    _rule("content", "frontend", "React", "from 'react'", 'from "react"', "react-dom/client", "reactdom.render"),
    _rule("content", "frontend", "Next.js", "from 'next/", 'from "next/'),
    _rule("content", "frontend", "Vue.js", "from 'vue'", 'from "vue"'),
    _rule("content", "frontend", "Tailwind CSS", "@tailwind "),
    _rule("content", "backend", "Express", "express()", "require('express')", 'require("express")'),
    _rule("content", "backend", "Flask", "from flask import"),
    _rule("content", "backend", "FastAPI", "from fastapi import"),
    _rule("content", "backend", "Django", "from django"),
    _rule("content", "backend", "Next.js API Routes", "nextapirequest", "nextresponse.json"),
    _rule("content", "database", "MongoDB", "mongoose.connect", "mongodb://", "mongodb+srv://", "mongoclient("),
    _rule("content", "database", "PostgreSQL", "postgres://", "postgresql://"),
    _rule("content", "database", "Firebase", "getfirestore(", "firebase/firestore"),
    _rule("content", "database", "SQLite", "sqlite3.connect("),
    # Code content: features
    _rule("content", "feature", "Real-time Communication", "socket.io", "new websocket(", "onsnapshot(", "pusher"),
    _rule("content", "feature", "User Authentication", "jsonwebtoken", "jwt.sign", "passport.", "next-auth", "firebase/auth", "signinwithpopup", "login_required"),
    _rule("content", "feature", "Payment Processing", "stripe"),
    _rule("content", "feature", "AI Integration", "openai", "generativeai", "generative-ai", "langchain", "anthropic", "huggingface"),
    _rule("content", "feature", "Data Visualization", "chart.js", "recharts", "d3.select", "plotly", "matplotlib"),
    _rule("content", "feature", "Interactive UI Components", "usestate(", "onclick=", "v-on:click", "@click="),
    _rule("content", "feature", "REST API Endpoints", "app.get(", "app.post(", "router.get(", "router.post(", "@app.route(", "@app.get(", "@router.get("),
    _rule("content", "feature", "External API Integration", "axios.", "await fetch("),
    _rule("content", "feature", "Database Operations", "prisma.", "session.query(", ".findone(", ".insertone("),
    _rule("content", "feature", "File Uploads", "multer", "new formdata(", "uploadbytes("),
    _rule("content", "feature", "Client-side Routing", "react-router", "usenavigate(", "userouter("),
    _rule("content", "feature", "Global State Management", "createstore(", "configurestore(", "zustand", "createcontext("),
    _rule("content", "feature", "Responsive Design", "@media"),
    _rule("content", "feature", "Email Notifications", "nodemailer", "sendgrid"),
)


def match_signals(
    kind: SignalKind,
    subjects: Iterable[str],
    rules: Iterable[SignalRule] = SIGNAL_RULES,
) -> list[SignalMatch]:
    """
    Single matching pass of ``subjects`` against the rules of one kind

    Each rule contributes at most one match per call, in table order, so a
    manifest listing both ``react`` and ``react-dom`` yields one React label.

    Args:
        kind: Which rules to apply
        subjects: Dependency names, file contents or file names
        rules: Rule table, overridable for tests

    Returns:
        Matches in rule-table order
    """
    subject_list = [subject for subject in subjects if subject]
    matches: list[SignalMatch] = []
    for rule in rules:
        if rule.kind != kind:
            continue
        if any(rule.matches(subject) for subject in subject_list):
            matches.append(SignalMatch(category=rule.category, label=rule.label))
    return matches

"""Fallback artifact generator.

Static, framework-keyed templates used whenever a model response yields
nothing usable. Lookups are total: any framework without its own template
gets the React one. Every call returns fresh copies of identical content.
"""

import copy
from typing import Any

from appgen.models.generation import CodeArtifact, ProjectFramework

REACT_FRONTEND = """import React from 'react';

function App() {
  return (
    <div className="min-h-screen bg-gray-50 flex items-center justify-center">
      <div className="max-w-md mx-auto bg-white rounded-xl shadow-md overflow-hidden">
        <div className="p-6">
          <h1 className="text-2xl font-bold text-gray-800 mb-4">
            Welcome to Your App
          </h1>
          <p className="text-gray-600">
            Your application has been generated. Start customizing it to match your requirements.
          </p>
        </div>
      </div>
    </div>
  );
}

export default App;"""

VUE_FRONTEND = """<template>
  <div id="app" class="min-h-screen bg-gray-50 flex items-center justify-center">
    <div class="max-w-md mx-auto bg-white rounded-xl shadow-md overflow-hidden">
      <div class="p-6">
        <h1 class="text-2xl font-bold text-gray-800 mb-4">
          Welcome to Your Vue App
        </h1>
        <p class="text-gray-600">
          {{ message }}
        </p>
      </div>
    </div>
  </div>
</template>

<script>
export default {
  name: 'App',
  data() {
    return {
      message: 'Your application has been generated.'
    };
  }
};
</script>"""

NEXTJS_FRONTEND = """import React from 'react';
import Head from 'next/head';

export default function Home() {
  return (
    <div>
      <Head>
        <title>Generated App</title>
      </Head>
      <main className="min-h-screen bg-gray-50 flex items-center justify-center">
        <div className="max-w-md mx-auto bg-white rounded-xl shadow-md p-6">
          <h1 className="text-2xl font-bold mb-4">Welcome to Your Next.js App</h1>
          <p className="text-gray-600">Your application has been generated.</p>
        </div>
      </main>
    </div>
  );
}"""

FRONTEND_TEMPLATES: dict[ProjectFramework, str] = {
    ProjectFramework.REACT: REACT_FRONTEND,
    ProjectFramework.VUE: VUE_FRONTEND,
    ProjectFramework.NEXTJS: NEXTJS_FRONTEND,
}

BASE_MANIFEST: dict[str, Any] = {
    "name": "appgen-generated-app",
    "version": "1.0.0",
    "private": True,
}

MANIFEST_TEMPLATES: dict[ProjectFramework, dict[str, Any]] = {
    ProjectFramework.REACT: {
        **BASE_MANIFEST,
        "dependencies": {
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
            "react-scripts": "^5.0.1",
        },
        "scripts": {
            "start": "react-scripts start",
            "build": "react-scripts build",
            "test": "react-scripts test",
        },
    },
    ProjectFramework.VUE: {
        **BASE_MANIFEST,
        "dependencies": {
            "vue": "^3.3.0",
        },
        "devDependencies": {
            "@vitejs/plugin-vue": "^4.2.0",
            "vite": "^4.3.0",
        },
    },
    ProjectFramework.NEXTJS: {
        **BASE_MANIFEST,
        "dependencies": {
            "next": "^13.4.0",
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
        },
        "scripts": {
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
        },
    },
}


def fallback_frontend(framework: ProjectFramework | str | None) -> str:
    """Static entry component for ``framework``."""
    return FRONTEND_TEMPLATES.get(
        ProjectFramework.resolve(framework), FRONTEND_TEMPLATES[ProjectFramework.REACT]
    )


def fallback_manifest(framework: ProjectFramework | str | None) -> dict[str, Any]:
    """Default package manifest for ``framework``."""
    template = MANIFEST_TEMPLATES.get(
        ProjectFramework.resolve(framework), MANIFEST_TEMPLATES[ProjectFramework.REACT]
    )
    return copy.deepcopy(template)


def fallback_artifact(framework: ProjectFramework | str | None) -> CodeArtifact:
    """Complete fallback artifact: template frontend, default manifest, no files."""
    return CodeArtifact(
        framework=ProjectFramework.resolve(framework),
        frontend=fallback_frontend(framework),
        package_manifest=fallback_manifest(framework),
        files=[],
    )

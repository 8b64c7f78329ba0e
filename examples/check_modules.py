"""
Example: Check a few modules and print the outdated ones.

Usage:
    python examples/check_modules.py
"""

import asyncio

from module_update_checker.core.config import CheckOptions
from module_update_checker.core.gallery import GalleryClient
from module_update_checker.core.inventory import LocalInventory
from module_update_checker.core.reconciler import ModuleReconciler, project


async def main():
    options = CheckOptions(disable_progress_bar=True)

    async with GalleryClient(options.repository) as gallery:
        reconciler = ModuleReconciler(registry=gallery, inventory=LocalInventory())
        result = await reconciler.run(["Pester", "PSReadLine", "PowerShellGet"], options)

    if not result.ok:
        print(f"Check failed ({result.failure.value}): {result.error}")
        return

    for row in project(result.rows):
        if row["updatable"] == "Yes":
            print(f"{row['name']}: {row['local_version']} -> {row['registry_version']} ({row['install_path']})")


if __name__ == "__main__":
    asyncio.run(main())
